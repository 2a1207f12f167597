"""Live widget base."""

from typing import Any, ClassVar

from ..actions.executor import ActionRunner
from ..catalog.components import ComponentType


class Widget:
    """
    A mounted interactive component.

    Widgets own a local copy of their props and rebuild it only when the
    incoming props object is a different reference, so optimistic local
    state survives re-renders of an unchanged node. ``revision`` counts
    rebuilds so work started before one can tell its state was replaced.
    """

    kind: ClassVar[ComponentType]

    def __init__(self, key: str, props: dict[str, Any], executor: ActionRunner) -> None:
        self.key = key
        self.executor = executor
        self._source_props = props
        self.revision = 0
        self.reset(props)

    def reset(self, props: dict[str, Any]) -> None:
        """Rebuild local state from props."""
        raise NotImplementedError

    def sync(self, props: dict[str, Any]) -> bool:
        """
        Adopt new props if they are a new object.

        Returns:
            True if local state was rebuilt
        """
        if props is self._source_props:
            return False
        self._source_props = props
        self.revision += 1
        self.reset(props)
        return True
