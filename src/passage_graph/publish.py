"""Render stories and passages to published HTML.

The output uses the <tw-storydata>/<tw-passagedata> elements that story
archives are stored in, so ingest.loader can read it back.
"""

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, FileSystemLoader

from passage_graph.config import get_settings

if TYPE_CHECKING:
    from passage_graph.models import Story

TEMPLATE_DIR = Path(__file__).parent / "templates"


def format_coordinate(value: float) -> str:
    """Render 100.0 as "100" and 12.5 as "12.5"."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


@lru_cache
def get_environment() -> Environment:
    """Get the cached template environment."""
    env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)), autoescape=True)
    env.filters["coordinate"] = format_coordinate
    return env


def render_passage(data: dict[str, Any]) -> str:
    """Render one passage from its publish data (see Passage.publish_data)."""
    template = get_environment().get_template("passage_data.html.jinja2")
    return template.render(**data)


def render_story(story: "Story") -> str:
    """
    Render a story with all its passages.

    Passages are numbered 1..n in story order; the start node is the
    number given to the start passage (blank if there is none).
    """
    settings = get_settings()
    start = story.start()

    fragments: list[str] = []
    startnode: int | str = ""

    for pid, passage in enumerate(story.passages, start=1):
        fragments.append(passage.publish(pid))
        if passage is start:
            startnode = pid

    template = get_environment().get_template("story_data.html.jinja2")
    return template.render(
        name=story.name,
        startnode=startnode,
        creator=settings.creator,
        creator_version=settings.creator_version,
        ifid=story.ifid,
        zoom=story.zoom,
        story_format=story.story_format,
        story_format_version=story.story_format_version,
        passages=fragments,
    )
