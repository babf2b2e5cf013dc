from __future__ import annotations

from .console import ConsoleRegistry
from .html import HtmlRegistry

__all__ = ["ConsoleRegistry", "HtmlRegistry"]
