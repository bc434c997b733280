"""Exception hierarchy for image cache requests.

Every failure aborts the current request and propagates to the host build.
"""

from typing import Self, override


class ImageCacheError(Exception):
    """Base class for all errors raised while serving a transform request."""

    def __init__(self, message: str = "Image transform failed."):
        self.message: str = message
        self.source: str | None = None
        self.options: str | None = None
        super().__init__(self.message)

    def with_request(self, source: object, options: object) -> Self:
        """Attach the offending request, keeping any context already present."""
        if self.source is None:
            self.source = str(source)
        if self.options is None:
            self.options = str(options)
        return self

    @override
    def __str__(self):
        if self.source is None:
            return self.message
        return f"{self.message} (source: {self.source!r}, options: {self.options!r})"


class InvalidInput(ImageCacheError):
    """Source or options missing, empty or of the wrong type."""


class UnreadableSource(ImageCacheError):
    """Resolved source path is missing or not a readable regular file."""


class MalformedCrop(ImageCacheError):
    """Crop geometry lacks the +x+y offset or cannot be parsed."""


class DegenerateCrop(ImageCacheError):
    """Crop rectangle would be empty or non-positive."""


class DecodeError(ImageCacheError):
    """Source image could not be decoded."""


class EncodeError(ImageCacheError):
    """Image could not be encoded or written to the cache."""


class ToolInvocationError(ImageCacheError):
    """External ImageMagick process failed to run or exited non-zero."""
