"""Quality plugin."""

from .schema import QualityParams
from .task import QualityTransform

__all__ = ["QualityTransform", "QualityParams"]
