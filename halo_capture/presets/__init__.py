"""Presets: ready-to-use config templates for common provider setups."""

from .base import get_preset, list_presets  # noqa: F401

# Import presets to trigger registration
from . import openai  # noqa: F401
from . import anthropic  # noqa: F401
from . import local  # noqa: F401
