"""
Text utilities shared by the generators.
"""

from .indented import IndentedStringBuilder, build_indented_string

__all__ = [
    "IndentedStringBuilder",
    "build_indented_string",
]
