"""Resize transform plugin."""

from .schema import ResizeParams
from .task import ResizeTransform

__all__ = ["ResizeTransform", "ResizeParams"]
