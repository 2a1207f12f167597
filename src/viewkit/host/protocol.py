"""The interface this package needs from an embedding host."""

from typing import Any, Protocol


class Host(Protocol):
    """
    Embedding host callbacks.

    ``call_tool`` raises on any failure; the action executor decides what a
    failure means. ``update_model_context`` and ``send_message`` narrate to
    the supervising agent and the operator.
    """

    async def get_host_capabilities(self) -> dict[str, Any] | None: ...

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Any: ...

    async def update_model_context(self, text: str) -> None: ...

    async def send_message(self, text: str) -> None: ...
