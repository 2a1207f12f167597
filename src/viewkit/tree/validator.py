"""
UI Tree Validator.

Reports structural problems as a list of issues; never raises. Issues are
warnings: the interpreter renders whatever it can regardless.
"""

from dataclasses import dataclass
from enum import Enum

from ..core.logging_config import get_logger
from .models import UITree

logger = get_logger(__name__)


class IssueCode(str, Enum):
    """Kinds of structural problems."""

    MISSING_ROOT = "missing_root"
    DANGLING_CHILD = "dangling_child"
    CYCLE = "cycle"
    EMPTY_TYPE = "empty_type"
    KEY_MISMATCH = "key_mismatch"


@dataclass(frozen=True)
class ValidationIssue:
    """A single structural problem, pinned to the offending node."""

    node_id: str
    code: IssueCode
    reason: str


def validate(tree: UITree) -> list[ValidationIssue]:
    """
    Check a tree for structural soundness.

    Checks run in order: root presence, dangling children, cycles reachable
    from the root, then per-node type and key consistency.

    Args:
        tree: Tree to check

    Returns:
        Issues found; empty for a sound tree
    """
    issues: list[ValidationIssue] = []

    if tree.root not in tree.elements:
        issues.append(
            ValidationIssue(tree.root, IssueCode.MISSING_ROOT, f"Root '{tree.root}' is not in elements")
        )

    for node_id, node in tree.elements.items():
        for child_id in node.child_ids:
            if child_id not in tree.elements:
                issues.append(
                    ValidationIssue(
                        node_id,
                        IssueCode.DANGLING_CHILD,
                        f"Child '{child_id}' of '{node_id}' is not in elements",
                    )
                )

    issues.extend(_find_cycles(tree))

    for node_id, node in tree.elements.items():
        if not node.type.strip():
            issues.append(ValidationIssue(node_id, IssueCode.EMPTY_TYPE, f"Node '{node_id}' has no type"))
        if node.key != node_id:
            issues.append(
                ValidationIssue(
                    node_id,
                    IssueCode.KEY_MISMATCH,
                    f"Node key '{node.key}' does not match its id '{node_id}'",
                )
            )

    return issues


def _find_cycles(tree: UITree) -> list[ValidationIssue]:
    """
    Iterative DFS from the root.

    A back edge into a node on the current path marks that node as a cycle
    entry point; each entry point is reported once however many back edges
    reach it.
    """
    if tree.root not in tree.elements:
        return []

    on_path: set[str] = set()
    done: set[str] = set()
    entry_points: list[str] = []

    # Stack of (node_id, iterator position)
    stack: list[tuple[str, int]] = [(tree.root, 0)]
    on_path.add(tree.root)

    while stack:
        node_id, pos = stack[-1]
        children = [c for c in tree.elements[node_id].child_ids if c in tree.elements]

        if pos >= len(children):
            stack.pop()
            on_path.discard(node_id)
            done.add(node_id)
            continue

        stack[-1] = (node_id, pos + 1)
        child_id = children[pos]

        if child_id in on_path:
            if child_id not in entry_points:
                entry_points.append(child_id)
        elif child_id not in done:
            on_path.add(child_id)
            stack.append((child_id, 0))

    return [
        ValidationIssue(node_id, IssueCode.CYCLE, f"Node '{node_id}' is reachable from itself")
        for node_id in entry_points
    ]


def log_issues(issues: list[ValidationIssue], source: str) -> None:
    """Log each issue as a warning."""
    for issue in issues:
        logger.warning(
            "tree_validation_issue",
            source=source,
            node_id=issue.node_id,
            code=issue.code.value,
            reason=issue.reason,
        )
