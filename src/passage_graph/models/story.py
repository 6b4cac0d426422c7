"""Story model: a collection of passages with a start point."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from passage_graph.config import get_settings
from passage_graph.layout import geometry
from passage_graph.library.persistence import SaveOptions
from passage_graph.models.passage import Passage, new_local_id
from passage_graph.observability import get_logger

if TYPE_CHECKING:
    from passage_graph.library import PersistenceHook, StoryResolver

log = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


class Story(BaseModel):
    """A story and the passages it owns."""

    model_config = ConfigDict(validate_assignment=True)

    id: int | str | None = None
    local_id: str = Field(default_factory=new_local_id)
    name: str = "Untitled Story"
    start_passage: int | str | None = None
    last_update: datetime = Field(default_factory=_now)
    ifid: str = Field(default_factory=lambda: str(uuid4()).upper())
    story_format: str = Field(default_factory=lambda: get_settings().default_story_format)
    story_format_version: str = Field(
        default_factory=lambda: get_settings().default_story_format_version
    )
    zoom: float = 1.0
    snap_to_grid: bool = False
    passages: list[Passage] = Field(default_factory=list)

    _resolver: "StoryResolver | None" = PrivateAttr(default=None)
    _persistence: "PersistenceHook | None" = PrivateAttr(default=None)

    @property
    def ref(self) -> int | str:
        """The id passages use to point at this story."""
        return self.id if self.id is not None else self.local_id

    def bind(
        self,
        resolver: "StoryResolver | None" = None,
        persistence: "PersistenceHook | None" = None,
    ) -> None:
        """Attach collaborators to this story and every passage in it."""
        self._resolver = resolver
        self._persistence = persistence

        for passage in self.passages:
            passage.story = self.ref
            passage.bind(resolver, persistence)

    # ------------------------------------------------------------------
    # Passages
    # ------------------------------------------------------------------

    def fetch_passages(self) -> list[Passage]:
        return list(self.passages)

    def passage_named(self, name: str) -> Passage | None:
        """Find a passage by name, ignoring case."""
        lowered = name.lower()
        return next((p for p in self.passages if p.name.lower() == lowered), None)

    def passage_with_id(self, passage_id: int | str) -> Passage | None:
        """Find a passage by its persisted id or its local id."""
        return next(
            (p for p in self.passages if p.id == passage_id or p.local_id == passage_id),
            None,
        )

    def start(self) -> Passage | None:
        """The passage the story begins at, if it still exists."""
        if self.start_passage is None:
            return None
        return self.passage_with_id(self.start_passage)

    def unique_name(self, base: str | None = None) -> str:
        """Return base, or base with the lowest number suffix not yet in use."""
        base = base or get_settings().default_passage_name

        if self.passage_named(base) is None:
            return base

        suffix = 1
        while self.passage_named(f"{base} {suffix}") is not None:
            suffix += 1
        return f"{base} {suffix}"

    def add_passage(self, passage: Passage | None = None, **attrs: Any) -> Passage:
        """
        Add a passage to this story.

        Without a passage, a new one is created from attrs; its name defaults
        to an unused variant of the untitled passage name.
        """
        if passage is None:
            attrs.setdefault("name", self.unique_name())
            passage = Passage(**attrs)

        passage.story = self.ref
        passage.bind(self._resolver, self._persistence)
        self.passages.append(passage)

        if self.start_passage is None:
            self.start_passage = passage.ref

        return passage

    def remove_passage(self, passage: Passage) -> None:
        self.passages = [p for p in self.passages if p is not passage]

    def place(self, passage: Passage, left: float, top: float) -> bool:
        """
        Move a passage and keep it clear of its siblings.

        The position is snapped to the grid when snap_to_grid is set, then
        the passage is displaced away from any sibling it lands on. The
        final position is saved.
        """
        if self.snap_to_grid:
            grid = get_settings().grid_size
            left, top = geometry.snap(left, grid), geometry.snap(top, grid)

        passage.update(touch_parent=False, left=left, top=top)
        collided = geometry.make_room(passage, self.passages)

        if collided:
            log.debug("passage_displaced", passage=passage.name, collisions=len(collided))

        # Position already changed in memory, so save() sees nothing to touch
        if not passage.save({"left": passage.left, "top": passage.top}):
            return False
        return self.touch()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def touch(self) -> bool:
        """Record that the story changed just now."""
        return self.save({"last_update": _now()})

    def save(self, attrs: dict[str, Any] | None = None) -> bool:
        """
        Apply and persist attributes.

        Returns:
            True if the save was accepted.
        """
        if attrs:
            for key, value in attrs.items():
                setattr(self, key, value)
            delta = {key: getattr(self, key) for key in attrs}
        else:
            delta = self.model_dump(exclude={"id", "passages"})

        if self._persistence is None:
            return True

        if not self._persistence.save(self, delta, SaveOptions()):
            log.warning("story_save_failed", story=self.name, fields=sorted(delta))
            return False

        log.debug("story_saved", id=self.id, fields=sorted(delta))
        return True

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish(self) -> str:
        """Publish the story and its passages to an HTML fragment."""
        from passage_graph.publish import render_story

        return render_story(self)
