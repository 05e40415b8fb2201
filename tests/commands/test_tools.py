"""
Tests for `run`, `include` and `include_lit`.
"""

import sys
from pathlib import Path

import pytest

from ppm import Engine
from ppm.commands.tools import make_absolute
from ppm.core.issues import INVALID_ARGS, IO_ERROR, MISSING_ARGS, UNKNOWN_COMMAND
from ppm.core.span import Span

PYTHON = sys.executable


@pytest.fixture
def rooted_engine(tmp_path):
    return Engine.with_predefined_commands({"x": "1"}).with_root_path(tmp_path)


class TestMakeAbsolute:
    """Tests for resolving paths."""

    def test_absolute_path_unchanged(self, tmp_path):
        """Absolute paths ignore the root."""
        assert make_absolute(tmp_path / "a", Path("/elsewhere")) == tmp_path / "a"

    def test_relative_to_root(self, tmp_path):
        """Relative paths are joined with the root."""
        assert make_absolute("a/b", tmp_path) == tmp_path / "a" / "b"

    def test_relative_to_cwd(self, tmp_path, monkeypatch):
        """Without a root the current directory is used."""
        monkeypatch.chdir(tmp_path)
        assert make_absolute("a", None) == Path.cwd() / "a"


class TestRun:
    """Tests for running processes."""

    def test_stdout_is_inserted(self, process):
        """The process output replaces the command."""
        assert process(f'(%run {PYTHON} -c "print(6*7)"%)') == ("42\n", [])

    def test_words_are_processed(self):
        """Each word is expanded before running."""
        engine = Engine.with_predefined_commands({"msg": "hi"})
        output, issues = engine.process_new(f"(%run {PYTHON} -c \"print('(%msg%)')\"%)")
        assert output == "hi\n"
        assert issues == []

    def test_runs_in_root_path(self, rooted_engine, tmp_path):
        """The root path is the working directory."""
        (tmp_path / "marker").write_text("")
        source = f"(%run {PYTHON} -c \"import os; print(os.path.exists('marker'))\"%)"
        assert rooted_engine.process_new(source) == ("True\n", [])

    def test_nothing_to_run(self, process):
        """An empty command line is reported."""
        output, issues = process("(%run%)")
        assert output == ""
        assert [(i.id, i.msg) for i in issues] == [(MISSING_ARGS, "no process to run given")]

    def test_missing_program(self, process):
        """Programs that cannot be started are I/O errors."""
        output, issues = process("(%run /nonexistent/ppm-test-program%)")
        assert output == ""
        assert [i.id for i in issues] == [IO_ERROR]
        assert issues[0].msg.startswith("IO Error while trying to run process")

    def test_null_byte_in_argument(self, process):
        """Arguments the OS cannot take are invalid arguments."""
        output, issues = process("(%run echo a\x00b%)")
        assert output == ""
        assert [i.id for i in issues] == [INVALID_ARGS]
        assert "embedded null byte" in issues[0].msg


class TestInclude:
    """Tests for including files."""

    def test_include_processes_contents(self, rooted_engine, tmp_path):
        """Included text is expanded."""
        (tmp_path / "part.txt").write_text("x=(%x%)")
        assert rooted_engine.process_new("(%include part.txt%)") == ("x=1", [])

    def test_include_lit_keeps_contents(self, rooted_engine, tmp_path):
        """include_lit inserts the file as it is."""
        (tmp_path / "part.txt").write_text("x=(%x%)")
        assert rooted_engine.process_new("(%include_lit part.txt%)") == ("x=(%x%)", [])

    def test_path_is_processed(self, rooted_engine, tmp_path):
        """The path argument is expanded."""
        (tmp_path / "1.txt").write_text("one")
        assert rooted_engine.process_new("(%include (%x%).txt%)") == ("one", [])

    def test_issues_point_at_include(self, rooted_engine, tmp_path):
        """Issues inside the file are reported on the include command."""
        (tmp_path / "part.txt").write_text("line\n(%nope x%)")
        source = "ab(%include part.txt%)"
        output, issues = rooted_engine.process_new(source)
        assert output == "abline\n"
        assert [(i.id, i.span) for i in issues] == [(UNKNOWN_COMMAND, Span(2, 20))]

    def test_message_names_include_location(self, rooted_engine, tmp_path):
        """Messages for included text name where the include starts."""
        (tmp_path / "part.txt").write_text("line\n(%nope x%)")
        _, issues = rooted_engine.process_new("ab\n(%include part.txt%)")
        assert [i.msg for i in issues] == [
            "invalid or unknown command at 2:1 (starting with nope x...)"
        ]

    def test_no_file_given(self, process):
        """A path is required."""
        output, issues = process("(%include%)")
        assert output == ""
        assert [(i.id, i.msg) for i in issues] == [(MISSING_ARGS, "no file to include given")]

    def test_missing_file(self, rooted_engine):
        """Unreadable files are I/O errors."""
        output, issues = rooted_engine.process_new("(%include_lit missing.txt%)")
        assert output == ""
        assert [i.id for i in issues] == [IO_ERROR]
        assert issues[0].msg.startswith("IO Error while trying to read file")
