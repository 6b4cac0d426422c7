"""Observability module for Passage Graph."""

from passage_graph.observability.logging import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
