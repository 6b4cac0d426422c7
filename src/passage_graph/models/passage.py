"""Passage model: a single node in a story."""

import html
import re
from typing import TYPE_CHECKING, Any, ClassVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from passage_graph.config import get_settings
from passage_graph.layout import geometry
from passage_graph.library.persistence import SaveOptions
from passage_graph.links import parser
from passage_graph.observability import get_logger

if TYPE_CHECKING:
    from passage_graph.library import PersistenceHook, StoryResolver
    from passage_graph.models.story import Story

log = get_logger(__name__)

Pattern = str | re.Pattern[str]

EXCERPT_LENGTH = 100


def new_local_id() -> str:
    """Generate a transient id for a record that has not been saved yet."""
    return f"c{uuid4().hex[:12]}"


def _compile(search: Pattern) -> re.Pattern[str]:
    # Compiled patterns keep their own flags
    return re.compile(search) if isinstance(search, str) else search


class Passage(BaseModel):
    """A single node in a story.

    Collaborators are injected: a StoryResolver to find the owning story and a
    PersistenceHook to save through. Either may be absent, in which case
    story lookups return None and saves only change this object.
    """

    model_config = ConfigDict(validate_assignment=True)

    # Onscreen size and collision padding, used by intersects() and displace()
    WIDTH: ClassVar[int] = geometry.WIDTH
    HEIGHT: ClassVar[int] = geometry.HEIGHT
    PADDING: ClassVar[float] = geometry.PADDING

    id: int | str | None = None
    local_id: str = Field(default_factory=new_local_id)
    story: int | str | None = None
    name: str = Field(default_factory=lambda: get_settings().default_passage_name)
    text: str = Field(default_factory=lambda: get_settings().placeholder_text)
    tags: list[str] = Field(default_factory=list)
    left: float = 0.0
    top: float = 0.0

    _resolver: "StoryResolver | None" = PrivateAttr(default=None)
    _persistence: "PersistenceHook | None" = PrivateAttr(default=None)
    _validation_error: str | None = PrivateAttr(default=None)

    def __init__(
        self,
        resolver: "StoryResolver | None" = None,
        persistence: "PersistenceHook | None" = None,
        **data: Any,
    ):
        super().__init__(**data)
        self._resolver = resolver
        self._persistence = persistence

    @field_validator("left", "top")
    @classmethod
    def clamp_to_canvas(cls, value: float) -> float:
        """Keep the passage on the positive quadrant of the canvas."""
        return value if value >= 0 else 0.0

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, tags: list[str]) -> list[str]:
        return list(dict.fromkeys(tags))

    @property
    def ref(self) -> int | str:
        """The id other records use to point at this passage."""
        return self.id if self.id is not None else self.local_id

    @property
    def validation_error(self) -> str | None:
        """Message from the last save() that failed validation."""
        return self._validation_error

    def bind(
        self,
        resolver: "StoryResolver | None" = None,
        persistence: "PersistenceHook | None" = None,
    ) -> None:
        """Attach the collaborators this passage works through."""
        self._resolver = resolver
        self._persistence = persistence

    # ------------------------------------------------------------------
    # Story and validation
    # ------------------------------------------------------------------

    def fetch_story(self) -> "Story | None":
        """Return the owning story, or None if it cannot be found."""
        if self._resolver is None or self.story is None:
            return None

        story = self._resolver.find_by_id(self.story)
        if story is None and isinstance(self.story, str):
            story = self._resolver.find_by_local_id(self.story)
        return story

    def validate(
        self,
        attrs: dict[str, Any] | None = None,
        no_validation: bool = False,
        no_dupe_validation: bool = False,
    ) -> str | None:
        """
        Check proposed attributes, returning an error message or None.

        The name must be non-empty and, unless no_dupe_validation is set,
        unique (ignoring case) among the other passages in the story.
        """
        if no_validation:
            return None

        name = (attrs or {}).get("name", self.name)

        if not name:
            return "You must give this passage a name."

        if no_dupe_validation:
            return None

        story = self.fetch_story()
        if story is None:
            return None

        for passage in story.fetch_passages():
            if passage is not self and passage.name.lower() == name.lower():
                return (
                    f'There is already a passage named "{name}." '
                    "Please give this one a unique name."
                )

        return None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def update(self, touch_parent: bool = True, **attrs: Any) -> dict[str, Any]:
        """
        Change attributes in memory.

        Negative coordinates are stored as 0. If anything changed, the owning
        story's last_update is touched unless touch_parent is False.

        Returns:
            The attributes that changed, with their stored values.
        """
        changed: dict[str, Any] = {}

        for key, value in attrs.items():
            old = getattr(self, key)
            setattr(self, key, value)

            # Compare stored values, since clamping may undo the write
            if getattr(self, key) != old:
                changed[key] = getattr(self, key)

        if changed and touch_parent:
            self._touch_story()

        return changed

    def set_text(self, text: str, touch_parent: bool = True) -> bool:
        """Replace the text and save it."""
        return self.save({"text": text}, touch_parent=touch_parent)

    def rename(
        self,
        name: str,
        update_links: bool = True,
        touch_parent: bool = True,
    ) -> str | None:
        """
        Rename this passage and save it.

        With update_links, links to the old name in every passage of the
        story are pointed at the new name.

        Returns:
            An error message if the rename was refused, else None.
        """
        old_name = self.name
        if name == old_name:
            return None

        if not self.save({"name": name}, touch_parent=touch_parent):
            return self.validation_error or f'Could not save passage "{name}".'

        story = self.fetch_story()
        if update_links and story is not None:
            for passage in story.fetch_passages():
                passage.replace_link(old_name, name)

        log.info("passage_renamed", old=old_name, new=name)
        return None

    def save(
        self,
        attrs: dict[str, Any] | None = None,
        touch_parent: bool = True,
        no_validation: bool = False,
        no_dupe_validation: bool = False,
    ) -> bool:
        """
        Validate, apply and persist attributes.

        Without attrs the whole passage is saved. Once the persistence hook
        accepts the save, any story whose start passage points at this
        passage's local id is repointed at its persisted id (unless
        touch_parent is False).

        Returns:
            True if the save was accepted.
        """
        options = SaveOptions(
            touch_parent=touch_parent,
            no_validation=no_validation,
            no_dupe_validation=no_dupe_validation,
        )

        error = self.validate(attrs, no_validation, no_dupe_validation)
        if error:
            self._validation_error = error
            log.info("passage_invalid", name=self.name, error=error)
            return False

        self._validation_error = None

        if attrs:
            self.update(touch_parent=touch_parent, **attrs)
            delta = {key: getattr(self, key) for key in attrs}
        else:
            delta = self.model_dump(exclude={"id"})

        if self._persistence is None:
            return True

        if not self._persistence.save(self, delta, options):
            log.warning("passage_save_failed", name=self.name, fields=sorted(delta))
            return False

        log.debug("passage_saved", id=self.id, fields=sorted(delta))

        if touch_parent:
            self._claim_start_passage()

        return True

    def _touch_story(self) -> None:
        story = self.fetch_story()
        if story is not None:
            story.touch()

    def _claim_start_passage(self) -> None:
        # Stories that started at our local id now start at our real id
        if self._resolver is None or self.id is None:
            return

        for story in self._resolver.all():
            if story.start_passage == self.local_id:
                story.save({"start_passage": self.id})

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def excerpt(self) -> str:
        """
        Return a short HTML-escaped excerpt of the text.

        Escaping happens before truncation, so a long excerpt may end
        partway through an entity.
        """
        text = html.escape(self.text)

        if len(text) > EXCERPT_LENGTH:
            return text[: EXCERPT_LENGTH - 1] + "&hellip;"

        return text

    def links(self, internal_only: bool = False) -> list[str]:
        """Return the unique link targets in this passage's text.

        Args:
            internal_only: Drop links that are URIs (e.g. http://twinery.org)
        """
        return parser.extract_links(self.text, internal_only)

    def replace_link(self, old_link: str, new_link: str) -> bool:
        """
        Point links to old_link at new_link, saving only if the text changed.

        Returns:
            True if the text changed and was saved.
        """
        text = parser.replace_link(self.text, old_link, new_link)

        if text == self.text:
            return False

        log.debug("links_replaced", passage=self.name, old=old_link, new=new_link)
        return self.save({"text": text})

    def matches(self, search: Pattern) -> bool:
        """Check whether the name or text matches a regular expression."""
        pattern = _compile(search)
        return bool(pattern.search(self.name) or pattern.search(self.text))

    def num_matches(self, search: Pattern, check_name: bool = False) -> int:
        """Count every match of a regular expression in the text, and optionally the name."""
        pattern = _compile(search)
        count = sum(1 for _ in pattern.finditer(self.text))

        if check_name:
            count += sum(1 for _ in pattern.finditer(self.name))

        return count

    def replace(self, search: Pattern, replacement: str, in_name: bool = False) -> bool:
        """Replace matches in the text, and optionally the name, then save."""
        pattern = _compile(search)

        if in_name:
            return self.save(
                {
                    "name": pattern.sub(replacement, self.name),
                    "text": pattern.sub(replacement, self.text),
                }
            )

        return self.save({"text": pattern.sub(replacement, self.text)})

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish_data(self, pid: int) -> dict[str, Any]:
        """Values handed to the passage template."""
        return {
            "id": pid,
            "name": self.name,
            "left": self.left,
            "top": self.top,
            "text": self.text,
            "tags": " ".join(self.tags) if self.tags else "",
        }

    def publish(self, pid: int) -> str:
        """Publish the passage to an HTML fragment.

        Args:
            pid: numeric id to give the passage in the output, *not* its own id
        """
        from passage_graph.publish import render_passage

        return render_passage(self.publish_data(pid))

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def intersects(self, other: "Passage") -> bool:
        """Check whether this passage overlaps another onscreen."""
        return geometry.intersects(self, other)

    def displace(self, other: "Passage") -> None:
        """Move another passage along one axis so it no longer overlaps this one."""
        geometry.displace(self, other)
