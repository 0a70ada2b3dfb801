"""Console renderers."""

from .console import render_capture, render_config

__all__ = ["render_capture", "render_config"]
