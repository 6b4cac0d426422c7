"""Data models for stories and their passages."""

from passage_graph.models.passage import Passage
from passage_graph.models.story import Story

__all__ = ["Passage", "Story"]
