"""Template registry.

Templates are external collaborators: each takes a normalized payload and
returns a tree. The registry only maps names to them.
"""

from typing import Any, Callable

from ..core.logging_config import get_logger
from ..tree.models import UITree

logger = get_logger(__name__)

Template = Callable[[dict[str, Any]], UITree]


class TemplateNotFoundError(Exception):
    """No template registered under the requested name."""

    pass


class TemplateRegistry:
    """Name -> template builder."""

    def __init__(self) -> None:
        self._templates: dict[str, Template] = {}

    def register(self, name: str, template: Template) -> None:
        if name in self._templates:
            logger.warning("template_replaced", template=name)
        self._templates[name] = template

    def names(self) -> list[str]:
        return sorted(self._templates)

    def build(self, name: str, payload: dict[str, Any]) -> UITree:
        """
        Build a tree with a registered template.

        Raises:
            TemplateNotFoundError: If no template has that name
        """
        template = self._templates.get(name)
        if template is None:
            raise TemplateNotFoundError(f"Unknown template: {name}")
        return template(payload)

    def __contains__(self, name: str) -> bool:
        return name in self._templates
