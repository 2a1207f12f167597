"""UI tree model, validation, interpretation and merging."""

from .merge import merge_trees
from .models import UINode, UITree
from .renderer import (
    InvalidTree,
    RenderedComponent,
    RenderedNode,
    Renderer,
    RenderOutput,
    UnknownComponent,
    render,
    to_html,
)
from .validator import IssueCode, ValidationIssue, log_issues, validate

__all__ = [
    "UINode",
    "UITree",
    "IssueCode",
    "ValidationIssue",
    "validate",
    "log_issues",
    "Renderer",
    "RenderOutput",
    "RenderedComponent",
    "RenderedNode",
    "UnknownComponent",
    "InvalidTree",
    "render",
    "to_html",
    "merge_trees",
]
