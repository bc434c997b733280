"""Host build system collaborator."""

from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Protocol, override, runtime_checkable


@runtime_checkable
class SiteContext(Protocol):
    """What the core needs from the host: a root, a base URL and a file sink.

    `register_generated_file` is called exactly once per newly produced
    artifact, never on a cache hit.
    """

    @property
    def source_root(self) -> Path: ...

    @property
    def base_url(self) -> str: ...

    def register_generated_file(self, root_dir: Path, relative_dir: str, filename: str) -> None: ...


@dataclass(frozen=True)
class GeneratedFile:
    root_dir: Path
    relative_dir: str
    filename: str

    @property
    def path(self) -> Path:
        return self.root_dir / self.relative_dir / self.filename


@dataclass
class LocalSite:
    """In-memory SiteContext for local builds and tests.

    Layout:
        source_root/
            <cache_dir>/
                <generated files>
    """

    root: str | PathLike[str]
    url: str = ""
    generated_files: list[GeneratedFile] = field(default_factory=list)

    @property
    def source_root(self) -> Path:
        return Path(self.root)

    @property
    def base_url(self) -> str:
        return self.url

    def register_generated_file(self, root_dir: Path, relative_dir: str, filename: str) -> None:
        self.generated_files.append(GeneratedFile(Path(root_dir), relative_dir, filename))

    @override
    def __repr__(self) -> str:
        return f"LocalSite(root={str(self.root)!r}, url={self.url!r}, generated={len(self.generated_files)})"


def join_url(base_url: str, relative_path: str) -> str:
    """Join a site base URL and a cache-relative path with exactly one slash."""
    return f"{base_url.rstrip('/')}/{relative_path.lstrip('/')}"
