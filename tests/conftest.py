"""Shared fixtures: a story library that saves to memory."""

import pytest

from passage_graph.library import MemoryPersistence, StoryLibrary


@pytest.fixture
def persistence():
    return MemoryPersistence()


@pytest.fixture
def library(persistence):
    return StoryLibrary(persistence=persistence)


@pytest.fixture
def story(library):
    """A saved story with no passages."""
    story = library.create_story(name="Test Story")
    story.save()
    return story
