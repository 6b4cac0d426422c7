"""Parse and rewrite links embedded in passage text.

Three link syntaxes are recognized inside ``[[`` ... ``]]``:

- Arrow links: ``[[display->target]]`` and ``[[target<-display]]``.
  The rightmost ``->`` and the leftmost ``<-`` are the divider, so
  display text may itself contain arrows.
- TiddlyWiki links: ``[[display|target]]``.
- Simple links: ``[[target]]``.

Any of them may carry a setter component, ``[[...][$x to 1]]``, which is
ignored when extracting targets and kept as-is when rewriting.
"""

import re
from dataclasses import dataclass, replace
from enum import Enum

# A link runs from [[ to the first ]] on the same line.
LINK_SPAN = re.compile(r"\[\[.*?\]\]")

# Targets that look like absolute URIs, e.g. http://twinery.org
EXTERNAL_LINK = re.compile(r"^\w+:///?\w", re.IGNORECASE)


class LinkForm(str, Enum):
    """Syntax a link token was written in."""

    ARROW_RIGHT = "arrow_right"  # display->target
    ARROW_LEFT = "arrow_left"  # target<-display
    PIPE = "pipe"  # display|target
    SIMPLE = "simple"  # target


@dataclass(frozen=True)
class LinkToken:
    """A single [[...]] link found in passage text."""

    start: int
    end: int
    form: LinkForm
    target: str
    display: str | None = None
    setter: str = ""  # includes the leading "][" but not the closing "]]", e.g. "][$x to 1"

    @property
    def link(self) -> str:
        """Name the link leads to.

        A reverse arrow with nothing before it, such as [[<-Next]], leads to
        the text after the arrow.
        """
        if self.form is LinkForm.ARROW_LEFT and not self.target:
            return self.display or ""
        return self.target

    @property
    def is_external(self) -> bool:
        return is_external(self.link)

    def retarget(self, link: str) -> "LinkToken":
        """Return a copy of this token that leads to link instead."""
        if self.form is LinkForm.ARROW_LEFT and not self.target:
            return replace(self, display=link)
        return replace(self, target=link)

    def render(self) -> str:
        """Return the source text for this token."""
        if self.form is LinkForm.ARROW_RIGHT:
            body = f"{self.display}->{self.target}"
        elif self.form is LinkForm.ARROW_LEFT:
            body = f"{self.target}<-{self.display}"
        elif self.form is LinkForm.PIPE:
            body = f"{self.display}|{self.target}"
        else:
            body = self.target
        return f"[[{body}{self.setter}]]"


def is_external(target: str) -> bool:
    """Whether a link target is an absolute URI rather than a passage name."""
    return EXTERNAL_LINK.match(target) is not None


def classify(inner: str) -> tuple[LinkForm, str, str | None, str]:
    """
    Classify the content between [[ and ]].

    Returns:
        Tuple of (form, target, display, setter)
    """
    setter_at = inner.find("][")
    if setter_at == -1:
        body, setter = inner, ""
    else:
        body, setter = inner[:setter_at], inner[setter_at:]

    # Arrow and pipe forms only apply when the body holds no stray "]"
    if "]" not in body:
        if "->" in body:
            divider = body.rfind("->")
            return LinkForm.ARROW_RIGHT, body[divider + 2 :], body[:divider], setter

        if "<-" in body:
            divider = body.find("<-")
            return LinkForm.ARROW_LEFT, body[:divider], body[divider + 2 :], setter

        if body.count("|") == 1:
            display, target = body.split("|")
            return LinkForm.PIPE, target, display, setter

    return LinkForm.SIMPLE, body.replace("[[", ""), None, setter


def scan_links(text: str) -> list[LinkToken]:
    """Find every link token in text, left to right."""
    tokens: list[LinkToken] = []

    for match in LINK_SPAN.finditer(text):
        form, target, display, setter = classify(match.group(0)[2:-2])
        tokens.append(
            LinkToken(
                start=match.start(),
                end=match.end(),
                form=form,
                target=target,
                display=display,
                setter=setter,
            )
        )

    return tokens


def extract_links(text: str, internal_only: bool = False) -> list[str]:
    """
    Return the unique link targets in text, in first-seen order.

    Empty links ([[]]) are dropped. With internal_only, targets that look
    like URIs are dropped too, leaving only references to other passages.
    """
    seen: set[str] = set()
    result: list[str] = []

    for token in scan_links(text):
        if token.link == "" or token.link in seen:
            continue
        seen.add(token.link)
        result.append(token.link)

    if internal_only:
        return [link for link in result if not is_external(link)]

    return result


def replace_link(text: str, old_target: str, new_target: str) -> str:
    """
    Point every link that targets old_target at new_target instead.

    Target names are compared as exact strings. Display text and setter
    components are left untouched.
    """
    pieces: list[str] = []
    cursor = 0

    for token in scan_links(text):
        if token.link != old_target:
            continue
        pieces.append(text[cursor : token.start])
        pieces.append(token.retarget(new_target).render())
        cursor = token.end

    if not pieces:
        return text

    pieces.append(text[cursor:])
    return "".join(pieces)
