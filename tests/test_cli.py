"""Tests for the command-line interface."""

import pytest
from click.testing import CliRunner

from passage_graph.cli import main
from passage_graph.ingest import load_archive
from passage_graph.models import Story


def write_story(path, passages):
    story = Story(name="CLI Tale", ifid="CLI")
    for name, text, left, top in passages:
        story.add_passage(name=name, text=text, left=left, top=top)
    path.write_text(story.publish(), encoding="utf-8")
    return path


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def clean_story(tmp_path):
    return write_story(
        tmp_path / "clean.html",
        [
            ("Start", "[[Next]] [[Docs->https://example.com]]", 0, 0),
            ("Next", "[[Start]]", 200, 0),
        ],
    )


@pytest.fixture
def messy_story(tmp_path):
    return write_story(
        tmp_path / "messy.html",
        [
            ("Start", "[[Nxt]]", 300, 300),
            ("Next", "Nothing here.", 320, 310),
            ("Lost", "", 600, 600),
        ],
    )


class TestLinksCommand:
    def test_lists_links(self, runner, clean_story):
        result = runner.invoke(main, ["links", str(clean_story)])
        assert result.exit_code == 0
        assert "Next" in result.output
        assert "https://example.com" in result.output

    def test_internal_only(self, runner, clean_story):
        result = runner.invoke(main, ["links", "--internal", str(clean_story)])
        assert result.exit_code == 0
        assert "https://example.com" not in result.output


class TestCheckCommand:
    def test_clean(self, runner, clean_story):
        result = runner.invoke(main, ["check", str(clean_story)])
        assert result.exit_code == 0
        assert "No problems found" in result.output

    def test_problems(self, runner, messy_story):
        result = runner.invoke(main, ["check", str(messy_story)])
        assert result.exit_code == 1
        assert "Broken link" in result.output
        assert "did you mean Next?" in result.output
        assert "Unreachable" in result.output
        assert "Overlapping" in result.output

    def test_bad_file(self, runner, tmp_path):
        path = tmp_path / "story.txt"
        path.write_text("hello")
        result = runner.invoke(main, ["check", str(path)])
        assert result.exit_code == 1


class TestTidyCommand:
    def test_writes_tidy_story(self, runner, messy_story, tmp_path):
        output = tmp_path / "tidy.html"
        result = runner.invoke(main, ["tidy", str(messy_story), "-o", str(output)])
        assert result.exit_code == 0

        from passage_graph.layout import find_overlaps

        story = load_archive(output)
        assert find_overlaps(story.passages) == []
        assert story.passage_named("Start").left == 300


class TestRenameCommand:
    def test_rename_rewrites_links(self, runner, clean_story, tmp_path):
        output = tmp_path / "renamed.html"
        result = runner.invoke(main, ["rename", str(clean_story), "Next", "Onward", "-o", str(output)])
        assert result.exit_code == 0

        story = load_archive(output)
        assert story.passage_named("Onward") is not None
        assert story.passage_named("Start").text.startswith("[[Onward]]")

    def test_rename_to_stdout(self, runner, clean_story):
        result = runner.invoke(main, ["rename", str(clean_story), "Next", "Onward"])
        assert result.exit_code == 0
        assert 'name="Onward"' in result.output

    def test_missing_passage(self, runner, clean_story):
        result = runner.invoke(main, ["rename", str(clean_story), "Nowhere", "X"])
        assert result.exit_code == 1

    def test_duplicate_name(self, runner, clean_story):
        result = runner.invoke(main, ["rename", str(clean_story), "Next", "start"])
        assert result.exit_code == 1
