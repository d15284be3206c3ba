"""Async git process orchestration and output parsing for editor git signs."""

from __future__ import annotations

__version__ = "0.1.0"
