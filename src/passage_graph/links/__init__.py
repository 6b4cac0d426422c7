"""Link parsing and rewriting for passage text."""

from passage_graph.links.parser import (
    LinkForm,
    LinkToken,
    extract_links,
    is_external,
    replace_link,
    scan_links,
)

__all__ = [
    "LinkForm",
    "LinkToken",
    "extract_links",
    "is_external",
    "replace_link",
    "scan_links",
]
