"""Records passed between the analyzers and the README generator.

Every record is created fresh for a single analysis run. ``ProjectData`` is
the only thing handed to the generation step and is frozen once built.
"""

from __future__ import annotations

import posixpath
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

FILE = "file"
DIRECTORY = "directory"

# ContentSample skip reasons
TOO_LARGE = "too-large"
BINARY = "binary"
UNREADABLE = "unreadable"
NOT_SAMPLED = "not-sampled"
NO_DOWNLOAD_URL = "no-download-url"
FETCH_FAILED = "fetch-failed"


@dataclass(frozen=True)
class ContentSample:
    """Outcome of trying to capture a file's text.

    ``reason`` is empty when ``content`` holds real file text; otherwise it
    names why the text was not captured and ``content`` is a placeholder
    (possibly empty).
    """

    content: str = ""
    reason: str = ""

    @classmethod
    def ok(cls, content: str) -> ContentSample:
        return cls(content=content)

    @classmethod
    def skipped(cls, reason: str, placeholder: str = "") -> ContentSample:
        return cls(content=placeholder, reason=reason)

    @property
    def is_ok(self) -> bool:
        return not self.reason


@dataclass(frozen=True)
class Entry:
    """A raw listing entry from a source provider.

    ``location`` is an absolute filesystem path for local sources and a raw
    download URL (or None) for remote ones.
    """

    name: str
    path: str
    kind: str
    size: int = 0
    location: str | None = None

    @property
    def is_dir(self) -> bool:
        return self.kind == DIRECTORY


@dataclass(frozen=True)
class FileRecord:
    """One collected file or directory."""

    name: str
    path: str
    kind: str
    size: int = 0
    content: str = ""
    skip_reason: str = ""

    @classmethod
    def directory(cls, name: str, path: str) -> FileRecord:
        return cls(name=name, path=path, kind=DIRECTORY)

    @classmethod
    def from_sample(cls, entry: Entry, sample: ContentSample) -> FileRecord:
        return cls(
            name=entry.name,
            path=entry.path,
            kind=FILE,
            size=entry.size,
            content=sample.content,
            skip_reason=sample.reason,
        )

    @property
    def is_file(self) -> bool:
        return self.kind == FILE

    @property
    def has_content(self) -> bool:
        """True when ``content`` is real sampled text, not a placeholder."""
        return self.is_file and not self.skip_reason and bool(self.content)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "type": self.kind,
            "size": self.size,
        }
        if self.is_file:
            data["content"] = self.content
            if self.skip_reason:
                data["skip_reason"] = self.skip_reason
        return data


@dataclass(frozen=True)
class StructureSummary:
    """Aggregate counts over a project tree.

    ``languages`` maps extension to count and is exposed read-only.
    """

    files: int = 0
    directories: int = 0
    languages: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "languages", MappingProxyType(dict(self.languages)))

    @classmethod
    def from_records(cls, records: Iterable[FileRecord]) -> StructureSummary:
        """Count a collected record list (used where no full walk exists)."""
        files = directories = 0
        extensions: Counter = Counter()
        for record in records:
            if record.is_file:
                files += 1
                ext = posixpath.splitext(record.name)[1].lower()
                if ext:
                    extensions[ext] += 1
            else:
                directories += 1
        return cls(files=files, directories=directories, languages=extensions)

    def top_extensions(self, limit: int = 10) -> list[tuple[str, int]]:
        return Counter(self.languages).most_common(limit)

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": self.files,
            "directories": self.directories,
            "languages": dict(self.languages),
        }


DEFAULT_LANGUAGE = "Unknown"
DEFAULT_VERSION = "1.0.0"


@dataclass
class ProjectInfo:
    """Best-effort project metadata inferred from manifests and markers."""

    name: str
    description: str = ""
    language: str = DEFAULT_LANGUAGE
    version: str = DEFAULT_VERSION


@dataclass(frozen=True)
class ProjectData:
    """Everything the README generator gets to see about a project."""

    path: str
    name: str
    description: str
    language: str
    version: str
    files: tuple[FileRecord, ...]
    structure: StructureSummary

    @classmethod
    def build(
        cls,
        path: str,
        info: ProjectInfo,
        files: Iterable[FileRecord],
        structure: StructureSummary,
    ) -> ProjectData:
        return cls(
            path=path,
            name=info.name,
            description=info.description,
            language=info.language,
            version=info.version,
            files=tuple(files),
            structure=structure,
        )

    def key_files(self, important: Iterable[str], limit: int = 5) -> list[tuple[str, str]]:
        """Return (path, content) pairs for sampled files with important names."""
        wanted = set(important)
        found = []
        for record in self.files:
            if record.has_content and record.name in wanted:
                found.append((record.path, record.content))
                if len(found) >= limit:
                    break
        return found

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "description": self.description,
            "language": self.language,
            "version": self.version,
            "files": [f.to_dict() for f in self.files],
            "structure": self.structure.to_dict(),
        }

    def summary_for_prompt(self, max_tree_entries: int = 80) -> str:
        """Generate a concise summary suitable for LLM prompt context."""
        lines = []
        lines.append(f"Project: {self.name}")
        if self.description:
            lines.append(f"Description: {self.description}")
        lines.append(f"Language: {self.language}")
        lines.append(f"Version: {self.version}")
        lines.append(
            f"Files: {self.structure.files}, Directories: {self.structure.directories}"
        )

        top = self.structure.top_extensions(8)
        if top:
            lines.append(f"File types: {', '.join(f'{ext} ({n})' for ext, n in top)}")

        if self.files:
            lines.append("File tree:")
            for record in self.files[:max_tree_entries]:
                suffix = "/" if record.kind == DIRECTORY else ""
                lines.append(f"  {record.path}{suffix}")
            if len(self.files) > max_tree_entries:
                lines.append(f"  ... ({len(self.files) - max_tree_entries} more)")

        return "\n".join(lines)


@dataclass
class Repository:
    """Public GitHub repository metadata plus its collected files."""

    name: str
    description: str
    language: str
    stars: int
    forks: int
    owner: str
    url: str
    files: list[FileRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "language": self.language,
            "stars": self.stars,
            "forks": self.forks,
            "owner": self.owner,
            "url": self.url,
            "files": [f.to_dict() for f in self.files],
        }


@dataclass
class GeneratedReadme:
    """Generated README document."""

    content: str
    sections: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content, "sections": list(self.sections)}
