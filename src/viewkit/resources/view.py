"""
The generic view resource.

Every view, template-built or generated, is served through one resource
identity. Legacy per-view URIs are aliases that resolve to the same,
always-current document.
"""

from dataclasses import dataclass
from typing import Any

from ..core.hash import etag
from ..core.logging_config import get_logger
from ..monitoring.metrics import MetricsCollector, metrics_collector
from ..tree.merge import merge_trees
from ..tree.models import UITree
from ..tree.renderer import RenderOutput, Renderer
from .injection import build_document, build_loading_document, encode_blob

logger = get_logger(__name__)

MIME_TYPE = "text/html;profile=mcp-app"
PRIMARY_URI = "ui://viewkit/view"
LEGACY_URIS = (
    "ui://viewkit/mcp-app",
    "ui://viewkit/pipeline-board",
    "ui://viewkit/quick-book",
    "ui://viewkit/opportunity-card",
    "ui://viewkit/contact-grid",
    "ui://viewkit/calendar-view",
    "ui://viewkit/invoice-preview",
    "ui://viewkit/campaign-stats",
    "ui://viewkit/agent-stats",
    "ui://viewkit/contact-timeline",
    "ui://viewkit/workflow-status",
)


class ResourceNotFoundError(Exception):
    """URI is neither the view resource nor one of its aliases."""

    pass


@dataclass(frozen=True)
class ResourceContents:
    """One read of the view resource."""

    uri: str
    mime_type: str
    text: str
    etag: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {"uri": self.uri, "mimeType": self.mime_type, "text": self.text}
        if self.etag:
            data["etag"] = self.etag
        return data


class ViewResource:
    """Holds the most recent tree and serves it rendered."""

    def __init__(self, renderer: Renderer, metrics: MetricsCollector = metrics_collector) -> None:
        self.renderer = renderer
        self.metrics = metrics
        self.tree: UITree | None = None
        self.context: dict[str, Any] = {}
        self._document: str | None = None
        self._etag: str | None = None

    @staticmethod
    def handles(uri: str) -> bool:
        return uri == PRIMARY_URI or uri in LEGACY_URIS

    def list_resources(self) -> list[dict[str, str]]:
        return [
            {"uri": uri, "name": "viewkit-view", "mimeType": MIME_TYPE}
            for uri in (PRIMARY_URI, *LEGACY_URIS)
        ]

    def inject(self, tree: UITree, context: dict[str, Any] | None = None, source: str = "template") -> RenderOutput:
        """
        Replace the current view.

        The incoming tree is merged into the current one so unchanged nodes
        keep their identity.
        """
        self.tree = merge_trees(self.tree, tree)
        self.context = dict(context or {})

        output = self.renderer.render(self.tree)
        blob = encode_blob(self.tree, self.context)
        self._document = build_document(output, blob, title=str(self.context.get("title", "View")))
        self._etag = etag(blob)

        self.metrics.record_render(source, output.placeholders)
        logger.info(
            "view_injected",
            source=source,
            root=self.tree.root,
            nodes=self.tree.node_count,
            placeholders=output.placeholders,
            etag=self._etag,
        )
        return output

    def read(self, uri: str = PRIMARY_URI) -> ResourceContents:
        """
        Read the current document.

        Raises:
            ResourceNotFoundError: If the uri is not the view resource
        """
        if not self.handles(uri):
            raise ResourceNotFoundError(f"Unknown resource: {uri}")
        if self._document is None:
            return ResourceContents(uri=uri, mime_type=MIME_TYPE, text=build_loading_document())
        return ResourceContents(uri=uri, mime_type=MIME_TYPE, text=self._document, etag=self._etag)
