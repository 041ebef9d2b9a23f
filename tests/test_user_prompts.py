"""Tests for modules/user_prompts.py - Console output helpers."""

from __future__ import annotations

from modules.constants import DIVIDER_LENGTH
from modules.user_prompts import (
    print_dim,
    print_error,
    print_header,
    print_info,
    print_section,
    print_separator,
    print_success,
    print_warning,
)


class TestMessages:
    """Tests for the one-line message helpers."""

    def test_symbols(self, capsys):
        print_success("done")
        print_warning("careful")
        print_error("failed")
        print_info("note")

        out = capsys.readouterr().out
        assert "✓ done" in out
        assert "⚠ careful" in out
        assert "✗ failed" in out
        assert "ℹ note" in out

    def test_dim(self, capsys):
        print_dim("secondary")
        assert "secondary" in capsys.readouterr().out


class TestLayout:
    """Tests for headers and dividers."""

    def test_header_with_subtitle(self, capsys):
        print_header("NovelSynth", "chapter.html")

        out = capsys.readouterr().out
        assert "NovelSynth" in out
        assert "chapter.html" in out
        assert "=" * DIVIDER_LENGTH in out

    def test_section(self, capsys):
        print_section("Results")
        assert "Results" in capsys.readouterr().out

    def test_separator(self, capsys):
        print_separator("*", 5)
        assert "*****" in capsys.readouterr().out
