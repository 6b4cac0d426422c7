"""Link graph analysis."""

from passage_graph.graph.links import (
    broken_links,
    build_link_graph,
    suggest_passage_name,
    unreachable_passages,
)

__all__ = ["broken_links", "build_link_graph", "suggest_passage_name", "unreachable_passages"]
