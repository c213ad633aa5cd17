"""Document loaders for resv-explorer."""

from resv_explorer.loaders.documents import load_document, parse_document

__all__ = [
    "load_document",
    "parse_document",
]
