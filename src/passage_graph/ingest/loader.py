"""Load stories from published story archives."""

from pathlib import Path

from bs4 import BeautifulSoup

from passage_graph.library import StoryLibrary
from passage_graph.models import Passage, Story
from passage_graph.observability import get_logger

log = get_logger(__name__)


def load_archive(path: Path, library: StoryLibrary | None = None) -> Story:
    """
    Load the first story in a published HTML file.

    Supports .html and .htm files containing a <tw-storydata> element.
    """
    suffix = path.suffix.lower()

    if suffix not in (".html", ".htm"):
        raise ValueError(f"Unsupported file format: {suffix}")

    return parse_archive(read_html(path), library)


def read_html(path: Path) -> str:
    """Read an HTML file, trying common encodings."""
    for encoding in ["utf-8", "utf-8-sig", "latin-1"]:
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue

    raise ValueError(f"Could not decode {path} with any common encoding")


def parse_position(position: str | None) -> tuple[float, float]:
    """Parse a "left,top" position attribute; missing or bad values are 0."""
    if not position:
        return 0.0, 0.0

    left, _, top = position.partition(",")
    try:
        return float(left), float(top)
    except ValueError:
        return 0.0, 0.0


def parse_archive(html: str, library: StoryLibrary | None = None) -> Story:
    """
    Build a Story from published story HTML.

    The story is added to library (a fresh one if not given). Nothing is
    saved; the passages only exist in memory.
    """
    soup = BeautifulSoup(html, "html.parser")
    story_el = soup.find("tw-storydata")

    if story_el is None:
        raise ValueError("No <tw-storydata> element found")

    library = library if library is not None else StoryLibrary()

    attrs = {
        "name": story_el.get("name") or "Untitled Story",
        "story_format": story_el.get("format"),
        "story_format_version": story_el.get("format-version"),
        "ifid": story_el.get("ifid"),
    }
    story = library.create_story(**{k: v for k, v in attrs.items() if v})

    zoom = story_el.get("zoom")
    if zoom:
        try:
            story.zoom = float(zoom)
        except ValueError:
            log.warning("bad_zoom", story=story.name, zoom=zoom)

    by_pid: dict[str, Passage] = {}

    for passage_el in story_el.find_all("tw-passagedata"):
        left, top = parse_position(passage_el.get("position"))
        passage = story.add_passage(
            Passage(
                name=passage_el.get("name", ""),
                text=passage_el.get_text(),
                tags=(passage_el.get("tags") or "").split(),
                left=left,
                top=top,
            )
        )
        by_pid[passage_el.get("pid", "")] = passage

    start = by_pid.get(story_el.get("startnode", ""))
    story.start_passage = start.ref if start is not None else None

    log.info("archive_loaded", story=story.name, passages=len(story.passages))
    return story
