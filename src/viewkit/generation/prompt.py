"""
View Generation Prompts
System prompt and user message assembly for dynamic UI tree generation.
"""

from typing import Any

from ..catalog.components import describe_catalog
from ..core.json import safe_json_dumps

# ============================================================================
# Tree Format Documentation
# ============================================================================

TREE_FORMAT_DOCUMENTATION = """
=== UI TREE FORMAT ===

A UI tree is ONE JSON object with a root id and a flat map of elements:
{
  "root": "page",
  "elements": {
    "page": {"key": "page", "type": "PageHeader", "props": {"title": "Pipeline"}, "children": ["stats"]},
    "stats": {"key": "stats", "type": "StatsGrid", "props": {"columns": 3}, "children": ["m1"]},
    "m1": {"key": "m1", "type": "MetricCard", "props": {"label": "Open Deals", "value": "12"}}
  }
}

Rules:
- "root" must be a key of "elements"
- every element's "key" equals its key in "elements"
- "children" lists element ids, in display order; only components marked
  [accepts children] may have children
- no element may be its own ancestor
- "type" must be a component name from the catalog below
"""

# ============================================================================
# System Prompt
# ============================================================================


def get_view_generation_prompt(max_nodes: int, max_table_rows: int) -> str:
    """
    Build the fixed system prompt.

    Args:
        max_nodes: Maximum number of elements in the tree
        max_table_rows: Maximum rows in any table

    Returns:
        Complete system prompt
    """
    return f"""You generate dashboard views as UI trees for a CRM operator.

CRITICAL RULES FOR VALID JSON OUTPUT:
1. Output ONLY raw JSON - start with {{ and end with }}
2. NO markdown blocks, NO explanations before/after
3. NO trailing commas, double-quoted keys and strings

{TREE_FORMAT_DOCUMENTATION}
{describe_catalog()}

=== DENSITY CONSTRAINTS ===
- At most {max_nodes} elements in total
- At most {max_table_rows} rows in any DataTable or LineItemsTable
- The view must fit a single viewport: prefer one header, one summary row and
  one or two detail components

=== DATA RULES ===
- Use ONLY the data provided in the user message
- Copy numbers, amounts and dates exactly as given
- Never invent records when data is provided

Remember: Output ONLY the JSON object."""


SYNTHETIC_DATA_INSTRUCTION = (
    "No CRM data is available for this request. Use minimal synthetic data: "
    "at most a few clearly placeholder records, just enough to show the layout."
)


def build_user_message(prompt: str, data: dict[str, Any]) -> str:
    """
    Build the user message: the request plus the resolved data verbatim.

    Args:
        prompt: Operator request
        data: Source name -> records

    Returns:
        User message text
    """
    if not data:
        return f"REQUEST:\n{prompt}\n\n{SYNTHETIC_DATA_INSTRUCTION}"

    return f"REQUEST:\n{prompt}\n\nDATA (use exactly as given):\n{safe_json_dumps(data, indent=2, sort_keys=True)}"
