"""Raw ImageMagick plugin."""

from .schema import RawToolParams
from .task import RawToolTransform

__all__ = ["RawToolTransform", "RawToolParams"]
