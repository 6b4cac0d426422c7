"""Story lookup.

Passages find their owning story through a StoryResolver handed to them,
never through module-level state.
"""

from typing import TYPE_CHECKING, Any, Protocol

from passage_graph.library.persistence import PersistenceHook
from passage_graph.observability import get_logger

if TYPE_CHECKING:
    from passage_graph.models import Passage, Story

log = get_logger(__name__)

StoryRef = int | str


class StoryResolver(Protocol):
    """Finds stories by persisted id or local id."""

    def find_by_id(self, story_id: StoryRef) -> "Story | None": ...

    def find_by_local_id(self, local_id: str) -> "Story | None": ...

    def all(self) -> "list[Story]": ...


class StoryLibrary:
    """In-memory collection of stories; the default StoryResolver."""

    def __init__(self, persistence: PersistenceHook | None = None):
        """Initialize the library.

        Args:
            persistence: Hook that stories and passages in this library save
                through. Without one, saves only change the objects in memory.
        """
        self.persistence = persistence
        self.stories: list["Story"] = []

    def __len__(self) -> int:
        return len(self.stories)

    def add(self, story: "Story") -> "Story":
        """Add a story, binding it and its passages to this library."""
        story.bind(resolver=self, persistence=self.persistence)
        self.stories.append(story)
        return story

    def create_story(self, **attrs: Any) -> "Story":
        """Create a story and add it to the library."""
        from passage_graph.models.story import Story

        return self.add(Story(**attrs))

    def remove(self, story: "Story") -> None:
        self.stories = [s for s in self.stories if s is not story]

    def all(self) -> list["Story"]:
        return list(self.stories)

    def find_by_id(self, story_id: StoryRef) -> "Story | None":
        return next((s for s in self.stories if s.id is not None and s.id == story_id), None)

    def find_by_local_id(self, local_id: str) -> "Story | None":
        return next((s for s in self.stories if s.local_id == local_id), None)

    def find(self, ref: StoryRef | None) -> "Story | None":
        """Find a story by either its id or its local id."""
        if ref is None:
            return None
        story = self.find_by_id(ref)
        if story is None and isinstance(ref, str):
            story = self.find_by_local_id(ref)
        return story

    def find_passage(self, passage_id: StoryRef) -> "Passage | None":
        """Locate a passage by its persisted id across every story."""
        for story in self.stories:
            passage = story.passage_with_id(passage_id)
            if passage is not None:
                return passage
        return None
