"""Component Catalog - the closed set of component types and their prop contracts.

Both the interpreter and the generation prompt read from this table, so a
component added here is immediately renderable and advertised to the model.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ComponentType(str, Enum):
    """Every component type the interpreter can render."""

    # Layout
    PAGE_HEADER = "PageHeader"
    CARD = "Card"
    STATS_GRID = "StatsGrid"
    SPLIT_LAYOUT = "SplitLayout"
    SECTION = "Section"

    # Data
    DATA_TABLE = "DataTable"
    KANBAN_BOARD = "KanbanBoard"
    METRIC_CARD = "MetricCard"
    STATUS_BADGE = "StatusBadge"
    TIMELINE = "Timeline"
    PROGRESS_BAR = "ProgressBar"
    DETAIL_HEADER = "DetailHeader"
    KEY_VALUE_LIST = "KeyValueList"
    LINE_ITEMS_TABLE = "LineItemsTable"
    INFO_BLOCK = "InfoBlock"
    CURRENCY_DISPLAY = "CurrencyDisplay"
    TAG_LIST = "TagList"
    CARD_GRID = "CardGrid"
    AVATAR_GROUP = "AvatarGroup"
    STAR_RATING = "StarRating"
    STOCK_INDICATOR = "StockIndicator"
    CHECKLIST_VIEW = "ChecklistView"
    AUDIO_PLAYER = "AudioPlayer"

    # Navigation
    SEARCH_BAR = "SearchBar"
    FILTER_CHIPS = "FilterChips"
    TAB_GROUP = "TabGroup"

    # Actions
    ACTION_BUTTON = "ActionButton"
    ACTION_BAR = "ActionBar"

    # Communications
    CHAT_THREAD = "ChatThread"
    EMAIL_PREVIEW = "EmailPreview"
    CONTENT_PREVIEW = "ContentPreview"
    TRANSCRIPT_VIEW = "TranscriptView"

    # Visualization
    CALENDAR_VIEW = "CalendarView"
    FLOW_DIAGRAM = "FlowDiagram"
    TREE_VIEW = "TreeView"
    MEDIA_GALLERY = "MediaGallery"
    DUPLICATE_COMPARE = "DuplicateCompare"

    # Charts
    BAR_CHART = "BarChart"
    LINE_CHART = "LineChart"
    PIE_CHART = "PieChart"
    FUNNEL_CHART = "FunnelChart"
    SPARKLINE_CHART = "SparklineChart"

    # Interactive
    CONTACT_PICKER = "ContactPicker"
    INVOICE_BUILDER = "InvoiceBuilder"
    OPPORTUNITY_EDITOR = "OpportunityEditor"
    APPOINTMENT_BOOKER = "AppointmentBooker"
    EDITABLE_FIELD = "EditableField"
    SELECT_DROPDOWN = "SelectDropdown"
    FORM_GROUP = "FormGroup"
    AMOUNT_INPUT = "AmountInput"


class PropType(str, Enum):
    """JSON value kinds a prop may hold."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"

    def accepts(self, value: Any) -> bool:
        """Check whether a JSON value matches this kind."""
        match self:
            case PropType.STRING:
                return isinstance(value, str)
            case PropType.NUMBER:
                return isinstance(value, (int, float)) and not isinstance(value, bool)
            case PropType.BOOLEAN:
                return isinstance(value, bool)
            case PropType.ARRAY:
                return isinstance(value, list)
            case PropType.OBJECT:
                return isinstance(value, dict)
        return False

    def zero(self) -> Any:
        """Neutral value used when a required prop is missing."""
        return {
            PropType.STRING: "",
            PropType.NUMBER: 0,
            PropType.BOOLEAN: False,
            PropType.ARRAY: [],
            PropType.OBJECT: {},
        }[self]


class ComponentSpec(BaseModel):
    """Prop/child contract of one component type."""

    model_config = ConfigDict(frozen=True)

    type: ComponentType
    category: str
    description: str
    required: dict[str, PropType] = Field(default_factory=dict)
    optional: dict[str, PropType] = Field(default_factory=dict)
    defaults: dict[str, Any] = Field(default_factory=dict)
    accepts_children: bool = False
    interactive: bool = False

    @property
    def prop_types(self) -> dict[str, PropType]:
        return {**self.optional, **self.required}


S, N, B, A, O = PropType.STRING, PropType.NUMBER, PropType.BOOLEAN, PropType.ARRAY, PropType.OBJECT


def _spec(
    type_: ComponentType,
    category: str,
    description: str,
    required: dict[str, PropType] | None = None,
    optional: dict[str, PropType] | None = None,
    defaults: dict[str, Any] | None = None,
    children: bool = False,
    interactive: bool = False,
) -> ComponentSpec:
    return ComponentSpec(
        type=type_,
        category=category,
        description=description,
        required=required or {},
        optional=optional or {},
        defaults=defaults or {},
        accepts_children=children,
        interactive=interactive,
    )


T = ComponentType

_SPECS: list[ComponentSpec] = [
    # Layout
    _spec(T.PAGE_HEADER, "layout", "Page title bar with optional status and inline stats",
          {"title": S}, {"subtitle": S, "status": S, "statusVariant": S, "gradient": B, "stats": A},
          {"gradient": False, "stats": []}, children=True),
    _spec(T.CARD, "layout", "Bordered container with optional title",
          optional={"title": S, "subtitle": S, "padding": S, "noBorder": B},
          defaults={"padding": "md", "noBorder": False}, children=True),
    _spec(T.STATS_GRID, "layout", "Grid of MetricCard children",
          optional={"columns": N}, defaults={"columns": 3}, children=True),
    _spec(T.SPLIT_LAYOUT, "layout", "Two-pane layout; first two children fill the panes",
          optional={"ratio": S, "gap": S}, defaults={"ratio": "50/50", "gap": "md"}, children=True),
    _spec(T.SECTION, "layout", "Titled vertical group of children",
          optional={"title": S, "description": S}, children=True),

    # Data
    _spec(T.DATA_TABLE, "data", "Tabular rows with typed columns",
          optional={"columns": A, "rows": A, "selectable": B, "emptyMessage": S, "pageSize": N, "rowClickTool": S},
          defaults={"columns": [], "rows": [], "selectable": False, "emptyMessage": "No data", "pageSize": 10},
          interactive=True),
    _spec(T.KANBAN_BOARD, "data", "Drag-and-drop board of columns holding cards",
          optional={"columns": A, "moveTool": S, "moveArgs": O, "cardClickTool": S},
          defaults={"columns": [], "moveArgs": {}}, interactive=True),
    _spec(T.METRIC_CARD, "data", "Single KPI with optional trend",
          {"label": S, "value": S}, {"trend": S, "trendValue": S, "color": S}, {"color": "default"}),
    _spec(T.STATUS_BADGE, "data", "Colored status pill",
          {"label": S}, {"variant": S}, {"variant": "active"}),
    _spec(T.TIMELINE, "data", "Vertical list of dated events",
          optional={"events": A}, defaults={"events": []}),
    _spec(T.PROGRESS_BAR, "data", "Labelled progress toward a maximum",
          {"label": S, "value": N},
          {"max": N, "color": S, "showPercent": B, "benchmark": N, "benchmarkLabel": S},
          {"max": 100, "color": "blue", "showPercent": True}),
    _spec(T.DETAIL_HEADER, "data", "Record title with id and status",
          {"title": S}, {"subtitle": S, "entityId": S, "status": S, "statusVariant": S}),
    _spec(T.KEY_VALUE_LIST, "data", "Label/value rows, optionally with a total row",
          optional={"items": A, "compact": B}, defaults={"items": [], "compact": False}),
    _spec(T.LINE_ITEMS_TABLE, "data", "Invoice-style line items with totals",
          optional={"items": A, "currency": S}, defaults={"items": [], "currency": "USD"}),
    _spec(T.INFO_BLOCK, "data", "Address-style block of lines under a label",
          {"label": S, "name": S}, {"lines": A}, {"lines": []}),
    _spec(T.CURRENCY_DISPLAY, "data", "Formatted monetary amount",
          {"amount": N}, {"currency": S, "locale": S, "size": S, "positive": B, "negative": B},
          {"currency": "USD", "locale": "en-US", "size": "md"}),
    _spec(T.TAG_LIST, "data", "Row of tags with overflow count",
          optional={"tags": A, "maxVisible": N, "size": S}, defaults={"tags": [], "maxVisible": 5, "size": "md"}),
    _spec(T.CARD_GRID, "data", "Grid of summary cards",
          optional={"cards": A, "columns": N}, defaults={"cards": [], "columns": 3}),
    _spec(T.AVATAR_GROUP, "data", "Overlapping avatars with overflow count",
          optional={"avatars": A, "max": N, "size": S}, defaults={"avatars": [], "max": 5, "size": "md"}),
    _spec(T.STAR_RATING, "data", "Star rating with optional distribution bars",
          optional={"rating": N, "count": N, "maxStars": N, "distribution": A, "showDistribution": B},
          defaults={"rating": 0, "maxStars": 5, "distribution": [], "showDistribution": False}),
    _spec(T.STOCK_INDICATOR, "data", "Quantity with low/critical thresholds",
          {"quantity": N}, {"lowThreshold": N, "criticalThreshold": N, "label": S},
          {"lowThreshold": 10, "criticalThreshold": 3}),
    _spec(T.CHECKLIST_VIEW, "data", "Checklist with completion progress",
          optional={"items": A, "title": S, "showProgress": B, "toggleTool": S},
          defaults={"items": [], "showProgress": True}, interactive=True),
    _spec(T.AUDIO_PLAYER, "data", "Recording or voicemail player",
          optional={"title": S, "duration": S, "type": S}, defaults={"type": "recording"}),

    # Navigation
    _spec(T.SEARCH_BAR, "navigation", "Search input",
          optional={"placeholder": S, "searchTool": S}, defaults={"placeholder": "Search..."}, interactive=True),
    _spec(T.FILTER_CHIPS, "navigation", "Toggleable filter chips",
          optional={"chips": A, "filterTool": S}, defaults={"chips": []}, interactive=True),
    _spec(T.TAB_GROUP, "navigation", "Tab strip with counts",
          optional={"tabs": A, "activeTab": S, "switchTool": S}, defaults={"tabs": []}, interactive=True),

    # Actions
    _spec(T.ACTION_BUTTON, "actions", "Button that invokes a tool",
          {"label": S}, {"variant": S, "size": S, "disabled": B, "toolName": S, "toolArgs": O},
          {"variant": "primary", "size": "md", "disabled": False, "toolArgs": {}}, interactive=True),
    _spec(T.ACTION_BAR, "actions", "Row of ActionButton children",
          optional={"align": S}, defaults={"align": "right"}, children=True),

    # Communications
    _spec(T.CHAT_THREAD, "comms", "Message thread",
          optional={"messages": A, "title": S, "sendTool": S}, defaults={"messages": []}, interactive=True),
    _spec(T.EMAIL_PREVIEW, "comms", "Email headers and body",
          {"from": S, "to": S, "subject": S, "date": S}, {"body": S, "cc": S, "attachments": A},
          {"attachments": []}),
    _spec(T.CONTENT_PREVIEW, "comms", "Rendered html/markdown/text content",
          optional={"content": S, "format": S, "maxHeight": N, "title": S},
          defaults={"content": "", "format": "text", "maxHeight": 400}),
    _spec(T.TRANSCRIPT_VIEW, "comms", "Call transcript entries",
          optional={"entries": A, "title": S, "duration": S}, defaults={"entries": []}),

    # Visualization
    _spec(T.CALENDAR_VIEW, "viz", "Month calendar with events",
          optional={"title": S, "events": A, "highlightToday": B, "year": N, "month": N},
          defaults={"events": [], "highlightToday": True}),
    _spec(T.FLOW_DIAGRAM, "viz", "Nodes and edges flow chart",
          optional={"nodes": A, "edges": A, "direction": S, "title": S},
          defaults={"nodes": [], "edges": [], "direction": "horizontal"}),
    _spec(T.TREE_VIEW, "viz", "Collapsible hierarchy",
          optional={"nodes": A, "title": S, "expandAll": B}, defaults={"nodes": [], "expandAll": False}),
    _spec(T.MEDIA_GALLERY, "viz", "Grid of media thumbnails",
          optional={"items": A, "columns": N, "title": S}, defaults={"items": [], "columns": 3}),
    _spec(T.DUPLICATE_COMPARE, "viz", "Side-by-side record comparison",
          optional={"records": A, "highlightDiffs": B, "title": S, "mergeTool": S},
          defaults={"records": [], "highlightDiffs": True}, interactive=True),

    # Charts
    _spec(T.BAR_CHART, "charts", "Bar chart",
          optional={"bars": A, "orientation": S, "maxValue": N, "showValues": B, "title": S},
          defaults={"bars": [], "orientation": "vertical", "showValues": True}),
    _spec(T.LINE_CHART, "charts", "Line chart",
          optional={"points": A, "color": S, "showPoints": B, "showArea": B, "title": S, "yAxisLabel": S},
          defaults={"points": [], "showPoints": True, "showArea": False}),
    _spec(T.PIE_CHART, "charts", "Pie or donut chart",
          optional={"segments": A, "donut": B, "title": S, "showLegend": B},
          defaults={"segments": [], "donut": False, "showLegend": True}),
    _spec(T.FUNNEL_CHART, "charts", "Funnel stages with drop-off",
          optional={"stages": A, "showDropoff": B, "title": S}, defaults={"stages": [], "showDropoff": True}),
    _spec(T.SPARKLINE_CHART, "charts", "Inline trend line",
          optional={"values": A, "color": S, "height": N, "width": N},
          defaults={"values": [], "height": 24, "width": 80}),

    # Interactive
    _spec(T.CONTACT_PICKER, "interactive", "Searchable contact selector",
          optional={"searchTool": S, "selectedId": S, "label": S, "placeholder": S, "selectTool": S},
          defaults={"placeholder": "Search contacts..."}, interactive=True),
    _spec(T.INVOICE_BUILDER, "interactive", "Editable invoice line items",
          optional={"items": A, "currency": S, "createTool": S, "contactSearchTool": S},
          defaults={"items": [], "currency": "USD"}, interactive=True),
    _spec(T.OPPORTUNITY_EDITOR, "interactive", "Form over a deal record",
          optional={"fields": O, "stages": A, "saveTool": S}, defaults={"fields": {}, "stages": []},
          interactive=True),
    _spec(T.APPOINTMENT_BOOKER, "interactive", "Slot picker that books appointments",
          optional={"slots": A, "calendarTool": S, "bookTool": S, "calendarId": S, "contactSearchTool": S},
          defaults={"slots": []}, interactive=True),
    _spec(T.EDITABLE_FIELD, "interactive", "Click-to-edit inline value",
          optional={"value": S, "label": S, "fieldType": S, "saveTool": S, "saveArgs": O},
          defaults={"value": "", "fieldType": "text", "saveArgs": {}}, interactive=True),
    _spec(T.SELECT_DROPDOWN, "interactive", "Dropdown with optional async options",
          optional={"options": A, "selectedValue": S, "label": S, "placeholder": S, "loadTool": S, "changeTool": S},
          defaults={"options": []}, interactive=True),
    _spec(T.FORM_GROUP, "interactive", "Form of typed fields with submit",
          optional={"fields": A, "submitTool": S, "submitLabel": S},
          defaults={"fields": [], "submitLabel": "Submit"}, interactive=True),
    _spec(T.AMOUNT_INPUT, "interactive", "Bounded currency amount input",
          optional={"value": N, "currency": S, "label": S, "min": N, "max": N},
          defaults={"value": 0, "currency": "USD"}, interactive=True),
]

CATALOG: dict[ComponentType, ComponentSpec] = {spec.type: spec for spec in _SPECS}

_BY_NAME: dict[str, ComponentType] = {t.value: t for t in ComponentType}


def resolve_type(name: Any) -> ComponentType | None:
    """Map a raw ``type`` string to its catalog variant, or None if unknown."""
    if not isinstance(name, str):
        return None
    return _BY_NAME.get(name)


def get_spec(component_type: ComponentType) -> ComponentSpec:
    """Get the contract for a known component type."""
    return CATALOG[component_type]


def normalize_props(spec: ComponentSpec, props: Any) -> dict[str, Any]:
    """
    Fit raw props to a component contract.

    Unknown props are dropped, wrongly-typed props fall back to the component
    default (or are dropped when there is none), and missing required props
    take the zero value of their type. Never raises.
    """
    raw = props if isinstance(props, dict) else {}
    result: dict[str, Any] = {}

    for name, prop_type in spec.prop_types.items():
        if name in raw and prop_type.accepts(raw[name]):
            result[name] = raw[name]
        elif name in spec.defaults:
            result[name] = spec.defaults[name]
        elif name in spec.required:
            result[name] = prop_type.zero()

    return result


def describe_catalog() -> str:
    """Format the catalog for a generation prompt, grouped by category."""
    lines = ["=== COMPONENT CATALOG ==="]
    category = None
    for spec in _SPECS:
        if spec.category != category:
            category = spec.category
            lines.append(f"\n{category.upper()}:")
        props = [f"{k}: {v.value} (required)" for k, v in spec.required.items()]
        props += [f"{k}: {v.value}" for k, v in spec.optional.items()]
        children = " [accepts children]" if spec.accepts_children else ""
        lines.append(f"  - {spec.type.value}{children}: {spec.description} ({', '.join(props) or 'no props'})")
    return "\n".join(lines)
