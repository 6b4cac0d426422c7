"""Tests for the story link graph."""

import pytest

from passage_graph.graph import (
    broken_links,
    build_link_graph,
    suggest_passage_name,
    unreachable_passages,
)
from passage_graph.models import Story


@pytest.fixture
def tale():
    story = Story(name="Tale")
    story.add_passage(name="Start", text="[[Go->Forest]] or [[Cave]] or [[Twine->https://twinery.org]]")
    story.add_passage(name="Forest", text="[[Start]] [[Clearing]]")
    story.add_passage(name="Cave", text="Dead end.")
    story.add_passage(name="Island", text="[[Start]]")
    return story


class TestLinkGraph:
    """Test link graph construction."""

    def test_edges(self, tale):
        graph = build_link_graph(tale)

        assert set(graph.successors("Start")) == {"Forest", "Cave"}
        assert graph.has_edge("Forest", "Start")
        assert "https://twinery.org" not in graph

    def test_broken_nodes(self, tale):
        graph = build_link_graph(tale)

        assert graph.nodes["Clearing"]["broken"] is True
        assert graph.nodes["Cave"]["broken"] is False

    def test_node_attributes(self, tale):
        tale.passage_named("Cave").update(left=300, top=40, tags=["dark"])
        node = build_link_graph(tale).nodes["Cave"]
        assert (node["left"], node["top"], node["tags"]) == (300, 40, ["dark"])


class TestAnalysis:
    """Test broken and unreachable passage detection."""

    def test_broken_links(self, tale):
        assert broken_links(tale) == {"Forest": ["Clearing"]}

    def test_unreachable(self, tale):
        assert unreachable_passages(tale) == ["Island"]

    def test_unreachable_without_start(self):
        assert unreachable_passages(Story(name="Empty")) == []


class TestSuggestions:
    """Test name suggestions for broken links."""

    def test_close_match(self, tale):
        assert suggest_passage_name(tale, "Forrest") == "Forest"
        assert suggest_passage_name(tale, "cave") == "Cave"

    def test_no_match(self, tale):
        assert suggest_passage_name(tale, "Spaceship") is None

    def test_threshold(self, tale):
        assert suggest_passage_name(tale, "Fores", threshold=99) is None

    def test_empty_story(self):
        assert suggest_passage_name(Story(name="Empty"), "Anything") is None
