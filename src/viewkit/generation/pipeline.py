"""
Dynamic Generation Pipeline.

prompt -> data sources -> collaborator call -> fence strip -> JSON parse
-> limits -> tree shape -> validator. Validator issues are logged only: the
interpreter copes with imperfect trees. Everything before that is a labeled
failure.
"""

import asyncio
import time

from pydantic import ValidationError as PydanticValidationError
from returns.pipeline import is_successful

from ..core.config import Settings
from ..core.id import new_generation_id
from ..core.json import JSONParseError, parse_json_object, strip_code_fences
from ..core.logging_config import LogContext, get_logger
from ..core.tracing import trace_operation_async
from ..core.validate import validate_reply
from ..monitoring.metrics import MetricsCollector, metrics_collector
from ..tree.models import UITree
from ..tree.validator import log_issues, validate
from .data_sources import DataSourceProvider, fetch_data, resolve_data_sources
from .errors import (
    GenerationError,
    GenerationFailedError,
    InvalidJSONResponseError,
    InvalidTreeResponseError,
)
from .gemini import GeminiGenerator, Generator
from .prompt import build_user_message, get_view_generation_prompt

logger = get_logger(__name__)


class GenerationPipeline:
    """Generates UI trees from natural-language requests."""

    def __init__(
        self,
        settings: Settings,
        generator: Generator | None = None,
        provider: DataSourceProvider | None = None,
        metrics: MetricsCollector = metrics_collector,
    ) -> None:
        self.settings = settings
        self._generator = generator
        self.provider = provider
        self.metrics = metrics

    @property
    def generator(self) -> Generator:
        """Collaborator, created on first use so a missing key fails the request, not startup."""
        if self._generator is None:
            self._generator = GeminiGenerator(self.settings)
        return self._generator

    async def generate(self, prompt: str, data_source_hint: str | None = None) -> UITree:
        """
        Generate a tree for a request.

        Args:
            prompt: Operator request
            data_source_hint: Optional explicit data sources

        Returns:
            Parsed tree (possibly with validator issues, already logged)

        Raises:
            MissingCredentialError: No collaborator credential
            GenerationFailedError: Collaborator call failed or timed out
            InvalidJSONResponseError: Reply was not a JSON object
            InvalidTreeResponseError: Reply JSON was not a tree or too large
        """
        generation_id = new_generation_id()
        start = time.time()
        with LogContext(generation_id=generation_id):
            try:
                async with trace_operation_async("generate_view", generation_id=generation_id):
                    tree = await self._generate(prompt, data_source_hint)
            except GenerationError as e:
                self.metrics.record_generation(e.category, time.time() - start)
                self.metrics.record_error(type(e).__name__, "generation")
                logger.error("generation_failed", category=e.category, error=e.message)
                raise

            self.metrics.record_generation("success", time.time() - start)
            logger.info("generation_complete", nodes=tree.node_count, root=tree.root)
            return tree

    async def _generate(self, prompt: str, data_source_hint: str | None) -> UITree:
        sources = resolve_data_sources(prompt, data_source_hint)
        data = await fetch_data(self.provider, sources)
        logger.info("generation_started", sources=[s.value for s in sources], has_data=bool(data))

        system = get_view_generation_prompt(self.settings.max_tree_nodes, self.settings.max_table_rows)
        user_message = build_user_message(prompt, data)
        generator = self.generator

        try:
            raw = await asyncio.wait_for(
                generator.generate(system, user_message),
                timeout=self.settings.generation_timeout,
            )
        except GenerationError:
            raise
        except asyncio.TimeoutError as e:
            raise GenerationFailedError(
                f"Generation timed out after {self.settings.generation_timeout}s"
            ) from e
        except Exception as e:
            raise GenerationFailedError(f"Generation call failed: {e}") from e

        if not isinstance(raw, str):
            raise GenerationFailedError("Generation collaborator returned no text")

        text = strip_code_fences(raw)
        try:
            parsed = parse_json_object(text)
        except JSONParseError as e:
            raise InvalidJSONResponseError(f"Response was not valid JSON: {e}") from e

        limits = validate_reply(raw, parsed, self.settings.max_response_size)
        if not is_successful(limits):
            raise InvalidTreeResponseError(limits.failure().message)

        try:
            tree = UITree.model_validate(parsed)
        except PydanticValidationError as e:
            raise InvalidTreeResponseError(f"Response is not a UI tree: {e.error_count()} errors") from e

        issues = validate(tree)
        log_issues(issues, source="generated")
        for issue in issues:
            self.metrics.record_tree_issue(issue.code.value)

        if tree.node_count > self.settings.max_tree_nodes:
            logger.warning("generated_tree_too_dense", nodes=tree.node_count, max_nodes=self.settings.max_tree_nodes)

        return tree
