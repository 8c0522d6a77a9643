"""Unit tests for utility functions (copy_crab.utils).

Tests cover:
- read_json / write_json (use tmp_path)
- configure_logging levels and handler
- Rich output helpers (print_summary_table, print_success, etc.)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from copy_crab.utils import (
    configure_logging,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
    read_json,
    write_json,
)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


class TestJsonIO:
    @pytest.mark.unit
    def test_read_json_object(self, tmp_path: Path):
        path = tmp_path / "doc.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        assert read_json(path) == {"a": 1}

    @pytest.mark.unit
    def test_read_json_any_document(self, tmp_path: Path):
        path = tmp_path / "doc.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert read_json(path) == [1, 2]

    @pytest.mark.unit
    def test_read_json_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            read_json(tmp_path / "nope.json")

    @pytest.mark.unit
    def test_read_json_invalid(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            read_json(path)

    @pytest.mark.unit
    def test_write_json_pretty_printed(self, tmp_path: Path):
        path = tmp_path / "out.json"
        write_json({"b": 1, "a": {"c": "ü"}}, path)
        text = path.read_text(encoding="utf-8")
        assert text == '{\n  "b": 1,\n  "a": {\n    "c": "ü"\n  }\n}\n'

    @pytest.mark.unit
    def test_write_json_creates_parents(self, tmp_path: Path):
        path = tmp_path / "nested" / "deep" / "out.json"
        write_json({}, path)
        assert read_json(path) == {}


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("copy_crab")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers, logger.level, logger.propagate = saved[0], saved[1], saved[2]


class TestConfigureLogging:
    @pytest.mark.unit
    def test_default_is_warning(self, restore_logger):
        configure_logging()
        assert restore_logger.level == logging.WARNING
        assert len(restore_logger.handlers) == 1
        assert isinstance(restore_logger.handlers[0], RichHandler)

    @pytest.mark.unit
    def test_verbose_is_debug(self, restore_logger):
        configure_logging(verbose=True)
        assert restore_logger.level == logging.DEBUG

    @pytest.mark.unit
    def test_repeated_calls_do_not_stack_handlers(self, restore_logger):
        configure_logging()
        configure_logging(verbose=True)
        assert len(restore_logger.handlers) == 1


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestRichOutputHelpers:
    @pytest.mark.unit
    def test_print_summary_table(self, capsys):
        print_summary_table({"Runtime": "Deno", "Modularity": "SingleFile"}, title="crabSafe")
        out = capsys.readouterr().out
        assert "Deno" in out
        assert "SingleFile" in out

    @pytest.mark.unit
    def test_print_success(self, capsys):
        print_success("crabSafe removed")
        assert "crabSafe removed" in capsys.readouterr().out

    @pytest.mark.unit
    def test_markup_is_escaped(self, capsys):
        print_error("Error: bad [key] value")
        assert "[key]" in capsys.readouterr().out

    @pytest.mark.unit
    def test_print_warning(self, capsys):
        print_warning("Nothing selected.")
        assert "Nothing selected." in capsys.readouterr().out

    @pytest.mark.unit
    def test_print_info(self, capsys):
        print_info("Found previous configuration")
        assert "Found previous configuration" in capsys.readouterr().out
