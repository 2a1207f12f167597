"""View Handler."""

import time
from typing import Any

from ..core.config import Settings
from ..core.logging_config import get_logger
from ..core.tracing import trace_operation, trace_operation_async
from ..core.validate import GenerationRequest, ValidationError
from ..generation.pipeline import GenerationPipeline
from ..monitoring.metrics import MetricsCollector, metrics_collector
from ..resources.templates import TemplateRegistry
from ..resources.view import PRIMARY_URI, ViewResource
from ..tree.models import UITree
from ..tree.validator import log_issues, validate

logger = get_logger(__name__)


def tool_result(tree: UITree, text: str) -> dict[str, Any]:
    """Tool-call result shape carrying the tree for the host."""
    return {
        "content": [{"type": "text", "text": text}],
        "structuredContent": {"uiTree": tree.to_dict()},
        "resourceUri": PRIMARY_URI,
    }


class ViewHandler:
    """Handles view tool invocations: template-built and generated."""

    def __init__(
        self,
        pipeline: GenerationPipeline,
        resource: ViewResource,
        templates: TemplateRegistry,
        settings: Settings,
        metrics: MetricsCollector = metrics_collector,
    ) -> None:
        self.pipeline = pipeline
        self.resource = resource
        self.templates = templates
        self.settings = settings
        self.metrics = metrics

    def show_template(self, name: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Build a tree from a registered template and publish it."""
        with trace_operation("show_template", template=name):
            tree = self.templates.build(name, payload)
            issues = validate(tree)
            log_issues(issues, source="template")
            for issue in issues:
                self.metrics.record_tree_issue(issue.code.value)

            self.resource.inject(tree, context={"template": name}, source="template")
            logger.info("template_view", template=name, nodes=tree.node_count, issues=len(issues))
            return tool_result(tree, f"Showing {name}")

    async def generate_view(self, prompt: str, data_source: str | None = None) -> dict[str, Any]:
        """
        Generate a tree from a natural-language request and publish it.

        Raises:
            ValidationError: Empty or oversized prompt
            GenerationError: Any generation failure category
        """
        try:
            validated = GenerationRequest(prompt=prompt, data_source=data_source)
        except ValueError as e:
            self.metrics.record_generation("validation_error", 0.0)
            raise ValidationError(str(e)) from e

        if len(validated.prompt) > self.settings.max_prompt_length:
            self.metrics.record_generation("validation_error", 0.0)
            raise ValidationError(
                f"Prompt length {len(validated.prompt)} exceeds maximum {self.settings.max_prompt_length}"
            )

        logger.info("generate_view", prompt=validated.prompt[:50], data_source=validated.data_source)
        start_time = time.time()

        async with trace_operation_async("generated_view", prompt=validated.prompt[:50]) as span:
            tree = await self.pipeline.generate(validated.prompt, validated.data_source)
            span.set_tag("nodes", str(tree.node_count))
            self.resource.inject(tree, context={"prompt": validated.prompt}, source="generated")

        logger.info("complete", duration_ms=(time.time() - start_time) * 1000)
        return tool_result(tree, f"Generated view for: {validated.prompt[:80]}")
