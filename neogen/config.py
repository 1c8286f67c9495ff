"""
Configuration for neogen generators.

Settings come from environment variables with the NEOGEN_ prefix. The
defaults reproduce the canonical record and fragment formats.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class GeneratorSettings(BaseSettings):
    """Generator configuration."""

    # Indentation unit for record blocks and outlines
    indent: str = Field(default="  ")

    # Fresh query variables are <prefix>0, <prefix>1, ...
    variable_prefix: str = Field(default="v", min_length=1)

    # Blank lines between rendered record blocks
    record_separator_lines: int = Field(default=1, ge=0)

    model_config = {"env_prefix": "NEOGEN_"}


@lru_cache(maxsize=1)
def get_settings() -> GeneratorSettings:
    """Get the process-wide settings, loaded once from the environment."""
    return GeneratorSettings()
