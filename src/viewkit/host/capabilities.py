"""Host Capability Detection."""

from dataclasses import dataclass
from typing import Any

from ..core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HostCapabilities:
    """
    What the embedding host allows for one session.

    Detected once at connection and never mutated; passed explicitly to
    everything that needs it.
    """

    can_call_tools: bool = False
    can_update_context: bool = False
    can_send_message: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {
            "canCallTools": self.can_call_tools,
            "canUpdateContext": self.can_update_context,
            "canSendMessage": self.can_send_message,
        }


DISCONNECTED = HostCapabilities()


def detect_capabilities(features: Any) -> HostCapabilities:
    """
    Derive capabilities from the host's declared features.

    Direct tool calls require a ``serverTools`` entry (an object, even an
    empty one, or any other truthy value). Context updates
    and operator messages are available on any connected host.

    Args:
        features: Feature map the host declared at connection, or None when
            there is no host

    Returns:
        Immutable capability set
    """
    if features is None:
        logger.info("host_capabilities_detected", connected=False)
        return DISCONNECTED

    declared = features if isinstance(features, dict) else {}
    server_tools = declared.get("serverTools")
    caps = HostCapabilities(
        # An empty capability object still declares the feature
        can_call_tools=isinstance(server_tools, (dict, list)) or bool(server_tools),
        can_update_context=True,
        can_send_message=True,
    )
    logger.info("host_capabilities_detected", connected=True, **caps.to_dict())
    return caps
