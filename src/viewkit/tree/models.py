"""
UI Tree data model.

A tree is a flat map of node id to node plus a root pointer. Structure is
never enforced here: dangling children, missing roots and cycles are legal
values that the validator reports and the interpreter survives. Malformed
node fields are coerced to empty values so one bad node never rejects the
whole tree.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UINode(BaseModel):
    """One node of a UI tree."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str = Field(default="")
    type: str = Field(default="")
    props: dict[str, Any] = Field(default_factory=dict)
    children: list[str] | None = Field(default=None)

    @field_validator("key", "type", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Non-string key or type becomes empty; the validator reports it."""
        return v if isinstance(v, str) else ""

    @field_validator("props", mode="before")
    @classmethod
    def coerce_props(cls, v: Any) -> dict[str, Any]:
        """Props that are not an object fall back to none; defaults apply at render time."""
        return v if isinstance(v, dict) else {}

    @field_validator("children", mode="before")
    @classmethod
    def coerce_children(cls, v: Any) -> list[str] | None:
        """Keep only string child ids."""
        if v is None:
            return None
        if not isinstance(v, list):
            return []
        return [c for c in v if isinstance(c, str)]

    @property
    def child_ids(self) -> list[str]:
        return self.children or []


class UITree(BaseModel):
    """Root pointer plus id -> node map."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    root: str
    elements: dict[str, UINode] = Field(default_factory=dict)

    @property
    def root_node(self) -> UINode | None:
        return self.elements.get(self.root)

    @property
    def node_count(self) -> int:
        return len(self.elements)

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-ready form, children omitted where absent."""
        return self.model_dump(mode="json", exclude_none=True)
