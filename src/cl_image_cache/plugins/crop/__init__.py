"""Crop plugin."""

from .schema import CropParams
from .task import CropTransform

__all__ = ["CropTransform", "CropParams"]
