"""View resource, tree injection and template registry."""

from .injection import DATA_ELEMENT_ID, build_document, build_loading_document, encode_blob, extract_tree
from .templates import Template, TemplateNotFoundError, TemplateRegistry
from .view import (
    LEGACY_URIS,
    MIME_TYPE,
    PRIMARY_URI,
    ResourceContents,
    ResourceNotFoundError,
    ViewResource,
)

__all__ = [
    "DATA_ELEMENT_ID",
    "LEGACY_URIS",
    "MIME_TYPE",
    "PRIMARY_URI",
    "ResourceContents",
    "ResourceNotFoundError",
    "Template",
    "TemplateNotFoundError",
    "TemplateRegistry",
    "ViewResource",
    "build_document",
    "build_loading_document",
    "encode_blob",
    "extract_tree",
]
