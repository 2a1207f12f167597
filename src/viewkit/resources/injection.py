"""
Tree injection and extraction.

The view resource is an HTML document carrying pre-rendered markup plus a
non-executable JSON blob holding the tree and its context. The blob is
encoded with sorted keys so the same tree always yields the same bytes.
"""

import html
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..core.json import safe_json_dumps
from ..tree.models import UITree
from ..tree.renderer import RenderOutput, to_html

DATA_ELEMENT_ID = "viewkit-data"


def _as_tree(value: Any) -> UITree | None:
    if not isinstance(value, dict) or "root" not in value or "elements" not in value:
        return None
    try:
        return UITree.model_validate(value)
    except PydanticValidationError:
        return None


def extract_tree(data: Any) -> UITree | None:
    """
    Find a UI tree in a tool result.

    Looks in ``structuredContent.uiTree``, then ``uiTree``, then the value
    itself, then each ``content[].structuredContent.uiTree``.

    Returns:
        The first tree found, or None
    """
    if isinstance(data, UITree):
        return data
    if not isinstance(data, dict):
        return None

    structured = data.get("structuredContent")
    if isinstance(structured, dict) and (tree := _as_tree(structured.get("uiTree"))):
        return tree

    if tree := _as_tree(data.get("uiTree")):
        return tree

    if tree := _as_tree(data):
        return tree

    content = data.get("content")
    if isinstance(content, list):
        for item in content:
            if not isinstance(item, dict):
                continue
            structured = item.get("structuredContent")
            if isinstance(structured, dict) and (tree := _as_tree(structured.get("uiTree"))):
                return tree

    return None


def encode_blob(tree: UITree, context: dict[str, Any] | None = None) -> str:
    """Deterministic JSON blob for a tree and its context."""
    return safe_json_dumps({"uiTree": tree.to_dict(), "context": context or {}}, sort_keys=True)


def _script_safe(blob: str) -> str:
    # Keep the blob from closing its own <script> element
    return blob.replace("</", "<\\/")


_DOCUMENT = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<div id="viewkit-root">{body}</div>
{data}
</body>
</html>
"""


def build_document(output: RenderOutput, blob: str, title: str = "View") -> str:
    """HTML document with rendered markup and the embedded data blob."""
    data = f'<script type="application/json" id="{DATA_ELEMENT_ID}">{_script_safe(blob)}</script>'
    return _DOCUMENT.format(title=html.escape(title), body=to_html(output), data=data)


def build_loading_document() -> str:
    """Document served before any tree has been injected."""
    return _DOCUMENT.format(
        title="View",
        body='<div class="vk-loading" aria-busy="true">Loading view...</div>',
        data="",
    )
