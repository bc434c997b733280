"""Format conversion plugin."""

from .schema import FormatParams
from .task import FormatTransform

__all__ = ["FormatTransform", "FormatParams"]
