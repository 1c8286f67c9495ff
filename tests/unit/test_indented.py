"""
Unit tests for the indented string builder.
"""

import pytest

from neogen.util.indented import IndentedStringBuilder, build_indented_string


class TestIndentedStringBuilder:
    """Tests for IndentedStringBuilder."""

    def test_append_and_newline(self):
        """Newline starts a line at the current indentation."""
        builder = IndentedStringBuilder("  ")
        builder.append("Person(")
        with builder.indented():
            builder.newline()
            builder.append("name: str,")
        builder.newline()
        builder.append(")")

        assert str(builder) == "Person(\n  name: str,\n)"

    def test_nested_indentation(self):
        """Indented regions stack and unwind."""
        builder = IndentedStringBuilder("\t")
        with builder.indented():
            with builder.indented():
                assert builder.indentation == 2
                builder.newline()
                builder.append("x")
            assert builder.indentation == 1
        assert builder.indentation == 0
        assert str(builder) == "\n\t\tx"

    def test_indentation_restored_after_error(self):
        """Indentation unwinds when the scoped region raises."""
        builder = IndentedStringBuilder()
        with pytest.raises(RuntimeError):
            with builder.indented():
                raise RuntimeError("boom")
        assert builder.indentation == 0

    def test_append_non_string(self):
        """Any object is appended by its string form."""
        builder = IndentedStringBuilder()
        builder.append(42)
        builder.append("|")
        assert str(builder) == "42|"

    def test_build_indented_string(self):
        """Helper runs a build function against a fresh builder."""

        def build(builder):
            builder.append("a")
            with builder.indented():
                builder.newline()
                builder.append("b")

        assert build_indented_string(build, tab="    ") == "a\n    b"
