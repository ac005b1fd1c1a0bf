"""Rendering backends implementing the Compositor contract."""

from .matplotlib_compositor import MatplotlibCompositor

__all__ = ["MatplotlibCompositor"]
