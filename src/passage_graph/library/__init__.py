"""Story library: lookup and persistence collaborators."""

from passage_graph.library.persistence import (
    MemoryPersistence,
    PersistenceHook,
    SaveOptions,
    SaveRecord,
)
from passage_graph.library.resolver import StoryLibrary, StoryRef, StoryResolver

__all__ = [
    "MemoryPersistence",
    "PersistenceHook",
    "SaveOptions",
    "SaveRecord",
    "StoryLibrary",
    "StoryRef",
    "StoryResolver",
]
