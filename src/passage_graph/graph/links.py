"""Link graph of a story: which passages lead where.

Nodes are passage names. A link to a name with no passage becomes a node
flagged broken=True, so broken links show up as ordinary edges.
"""

from typing import TYPE_CHECKING

import networkx as nx
from rapidfuzz import fuzz, process

from passage_graph.config import get_settings

if TYPE_CHECKING:
    from passage_graph.models import Story


def build_link_graph(story: "Story") -> nx.DiGraph:
    """Build a directed graph of internal links between passages."""
    graph = nx.DiGraph()

    for passage in story.passages:
        graph.add_node(
            passage.name,
            left=passage.left,
            top=passage.top,
            tags=list(passage.tags),
            broken=False,
        )

    for passage in story.passages:
        for target in passage.links(internal_only=True):
            if target not in graph:
                graph.add_node(target, broken=True)
            graph.add_edge(passage.name, target)

    return graph


def broken_links(story: "Story") -> dict[str, list[str]]:
    """Map each passage name to the link targets that match no passage."""
    graph = build_link_graph(story)
    result: dict[str, list[str]] = {}

    for passage in story.passages:
        missing = [t for t in passage.links(internal_only=True) if graph.nodes[t]["broken"]]
        if missing:
            result[passage.name] = missing

    return result


def unreachable_passages(story: "Story") -> list[str]:
    """Names of passages that cannot be reached from the start passage."""
    start = story.start()
    if start is None:
        return []

    graph = build_link_graph(story)
    reachable = nx.descendants(graph, start.name) | {start.name}

    return [p.name for p in story.passages if p.name not in reachable]


def suggest_passage_name(
    story: "Story", target: str, threshold: float | None = None
) -> str | None:
    """Suggest the existing passage name closest to a broken link target."""
    if threshold is None:
        threshold = get_settings().suggestion_threshold

    names = {p.name.lower(): p.name for p in story.passages}
    if not names:
        return None

    result = process.extractOne(target.lower(), names.keys(), scorer=fuzz.ratio)
    if result and result[1] >= threshold:
        return names[result[0]]

    return None
