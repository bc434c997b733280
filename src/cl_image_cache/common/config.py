"""Process-wide cache configuration."""

from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FilenamePolicy(StrEnum):
    """How destination filenames are derived from the cache key material."""

    HASH = "hash"
    SLUG = "slug"


class CacheSettings(BaseSettings):
    """
    Settings for the transform cache, read from keyword arguments or
    `CL_IMAGE_CACHE_*` environment variables.
    """

    model_config = SettingsConfigDict(env_prefix="CL_IMAGE_CACHE_", frozen=True)

    cache_dir: str = Field(
        default="cache/resize",
        description="Cache directory, relative to the site source root",
    )
    hash_length: int = Field(
        default=32,
        ge=1,
        le=40,
        description="Number of SHA-1 hex digits kept in hashed filenames",
    )
    filename_policy: FilenamePolicy = Field(
        default=FilenamePolicy.HASH,
        description="Destination filename derivation policy",
    )
    magick_command: list[str] | None = Field(
        default=None,
        description="ImageMagick argv prefix; auto-detected from PATH when unset",
    )
    tool_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Seconds before a raw ImageMagick invocation is aborted",
    )

    @property
    def cache_dir_posix(self) -> str:
        """Cache directory as a relative posix path without surrounding slashes."""
        return self.cache_dir.replace("\\", "/").strip("/")
