"""Trace renderers."""

from .console import Verbosity, render_trace

__all__ = ["Verbosity", "render_trace"]
