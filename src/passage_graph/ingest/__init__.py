"""Story archive ingestion."""

from passage_graph.ingest.loader import load_archive, parse_archive

__all__ = ["load_archive", "parse_archive"]
