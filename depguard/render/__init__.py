"""Human- and CI-facing renderings of depguard reports."""

from .annotations import render_annotations
from .markdown import render_markdown

__all__ = ["render_annotations", "render_markdown"]
