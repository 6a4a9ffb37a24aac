"""Local directory analyzer.

Two independent walks over the same tree: ``scan_structure`` counts every
non-excluded entry (deep, uncapped by count), ``collect_files`` gathers a
bounded, prioritized list of file records with sampled content.
"""

from __future__ import annotations

import os
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from .logging import get_logger
from .models import (
    BINARY,
    DIRECTORY,
    FILE,
    NOT_SAMPLED,
    TOO_LARGE,
    UNREADABLE,
    ContentSample,
    Entry,
    FileRecord,
    StructureSummary,
)
from .sources import EntrySource

logger = get_logger("local")

MAX_FILE_SIZE = 100 * 1024
MAX_FILES = 200
MAX_COLLECT_DEPTH = 8
MAX_STRUCTURE_DEPTH = 10
MAX_CONTENT_CHARS = 5000
BINARY_SNIFF_BYTES = 1024

# Whole path segments: a directory or file with exactly this name
_EXCLUDED_NAMES = (
    ".git", "node_modules", "dist", "build", "coverage",
    ".next", ".nuxt", ".cache", ".vscode", ".idea", ".DS_Store",
    ".env.local", ".env.production",
    "package-lock.json", "yarn.lock", "pnpm-lock.yaml",
    "composer.lock", "Pipfile.lock", "poetry.lock",
)
_EXCLUDED_SUFFIXES = (".pyc", ".log", ".tmp", ".temp")

EXCLUDE_PATTERNS = tuple(
    [re.compile(rf"(?:^|/){re.escape(name)}(?:/|$)") for name in _EXCLUDED_NAMES]
    + [re.compile(rf"{re.escape(suffix)}$") for suffix in _EXCLUDED_SUFFIXES]
)

IMPORTANT_FILES = (
    "package.json", "tsconfig.json", "next.config.js", "vite.config.js",
    "webpack.config.js", "tailwind.config.js",
    "requirements.txt", "Pipfile", "pyproject.toml", "setup.py",
    "Cargo.toml", "go.mod", "pom.xml", "build.gradle", "Gemfile",
    "composer.json", "Dockerfile", "docker-compose.yml", ".env.example",
    "config.js", "config.json",
)

TEXT_EXTENSIONS = frozenset({
    ".js", ".ts", ".jsx", ".tsx", ".vue", ".svelte",
    ".py", ".rb", ".php", ".go", ".rs", ".java", ".c", ".cpp", ".h", ".hpp",
    ".css", ".scss", ".sass", ".less", ".styl",
    ".html", ".htm", ".xml", ".svg",
    ".json", ".yaml", ".yml", ".toml", ".ini", ".conf",
    ".md", ".txt", ".rst", ".adoc",
    ".sh", ".bash", ".zsh", ".fish",
    ".sql", ".graphql", ".gql",
    ".dockerfile", ".gitignore", ".gitattributes",
})

ENV_FILE_PREFIX = ".env"


def is_excluded(relative_path: str) -> bool:
    """Check a forward-slash path (relative to the analysis root)."""
    return any(pattern.search(relative_path) for pattern in EXCLUDE_PATTERNS)


def is_important(name: str) -> bool:
    return name in IMPORTANT_FILES


def prioritize(entries: list[Entry]) -> list[Entry]:
    """Important filenames first; relative order otherwise kept."""
    return sorted(entries, key=lambda e: 0 if is_important(e.name) else 1)


def _sample_extension(name: str) -> str:
    ext = os.path.splitext(name)[1].lower()
    # ".gitignore" has no suffix of its own but is still a known text file
    if not ext and name.startswith("."):
        return name.lower()
    return ext


def should_sample(name: str) -> bool:
    """Whether a file's content is worth reading at all."""
    if is_important(name):
        return True
    return _sample_extension(name) in TEXT_EXTENSIONS or name.startswith(ENV_FILE_PREFIX)


def sample_content(path: Path, size: int, name: str | None = None) -> ContentSample:
    """Decide whether and how to capture a file's text.

    Never raises: oversized, binary, unreadable and uninteresting files all
    come back as ``ContentSample.skipped`` with a reason.
    """
    name = name or path.name

    if size > MAX_FILE_SIZE:
        kb = int(size / 1024 + 0.5)
        return ContentSample.skipped(TOO_LARGE, f"[File too large: {kb}KB]")

    if not should_sample(name):
        return ContentSample.skipped(NOT_SAMPLED)

    try:
        with open(path, "rb") as fh:
            data = fh.read()
    except OSError as e:
        logger.debug("Cannot read %s: %s", path, e)
        return ContentSample.skipped(UNREADABLE, "[Unable to read file content]")

    if b"\0" in data[:BINARY_SNIFF_BYTES]:
        return ContentSample.skipped(BINARY, f"[Binary file: {os.path.splitext(name)[1]}]")

    return ContentSample.ok(data.decode("utf-8", errors="replace")[:MAX_CONTENT_CHARS])


class LocalSource:
    """Filesystem provider rooted at a directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def list_entries(self, path: str = "") -> list[Entry]:
        """List one directory in name order.

        Raises OSError when the directory itself cannot be read. Symlinks
        and special files come back with kind "other".
        """
        directory = self.root / path if path else self.root
        entries = []
        with os.scandir(directory) as it:
            for item in sorted(it, key=lambda d: d.name):
                rel = f"{path}/{item.name}" if path else item.name
                try:
                    if item.is_dir(follow_symlinks=False):
                        kind, size = DIRECTORY, 0
                    elif item.is_file(follow_symlinks=False):
                        kind, size = FILE, item.stat(follow_symlinks=False).st_size
                    else:
                        kind, size = "other", 0
                except OSError as e:
                    logger.debug("Cannot stat %s: %s", rel, e)
                    continue
                entries.append(Entry(name=item.name, path=rel, kind=kind, size=size, location=item.path))
        return entries

    def should_include(self, entry: Entry) -> bool:
        return entry.kind in (FILE, DIRECTORY) and not is_excluded(entry.path)

    def fetch_content(self, entry: Entry) -> ContentSample:
        return sample_content(Path(entry.location or self.root / entry.path), entry.size, entry.name)


@dataclass
class _Tally:
    """Running counts threaded through the structure walk."""

    files: int = 0
    directories: int = 0
    extensions: Counter = field(default_factory=Counter)

    def summary(self) -> StructureSummary:
        return StructureSummary(files=self.files, directories=self.directories, languages=self.extensions)


def scan_structure(root: str | Path, max_depth: int = MAX_STRUCTURE_DEPTH) -> StructureSummary:
    """Count files, directories and extensions across the whole tree."""
    source = LocalSource(root)
    tally = _Tally()
    _scan(source, "", 0, max_depth, tally)
    return tally.summary()


def _scan(source: EntrySource, path: str, depth: int, max_depth: int, tally: _Tally) -> None:
    if depth > max_depth:
        return
    try:
        entries = source.list_entries(path)
    except OSError as e:
        logger.debug("Skipping unreadable directory %s: %s", path or ".", e)
        return

    for entry in entries:
        if not source.should_include(entry):
            continue
        if entry.is_dir:
            tally.directories += 1
            _scan(source, entry.path, depth + 1, max_depth, tally)
        else:
            tally.files += 1
            ext = os.path.splitext(entry.name)[1].lower()
            if ext:
                tally.extensions[ext] += 1


@dataclass
class _Collection:
    """Accumulator threaded through the collecting walk."""

    max_files: int
    records: list[FileRecord] = field(default_factory=list)
    file_count: int = 0

    @property
    def full(self) -> bool:
        return self.file_count >= self.max_files

    def add_directory(self, entry: Entry) -> None:
        self.records.append(FileRecord.directory(entry.name, entry.path))

    def add_file(self, entry: Entry, sample: ContentSample) -> None:
        self.records.append(FileRecord.from_sample(entry, sample))
        self.file_count += 1


def collect_files(
    root: str | Path,
    max_files: int = MAX_FILES,
    max_depth: int = MAX_COLLECT_DEPTH,
) -> list[FileRecord]:
    """Collect a bounded, prioritized list of file and directory records."""
    source = LocalSource(root)
    collection = _Collection(max_files=max_files)
    _collect(source, "", 0, max_depth, collection)
    return collection.records


def _collect(source: EntrySource, path: str, depth: int, max_depth: int, collection: _Collection) -> None:
    if depth > max_depth or collection.full:
        return
    try:
        entries = source.list_entries(path)
    except OSError as e:
        logger.debug("Skipping unreadable directory %s: %s", path or ".", e)
        return

    for entry in prioritize(entries):
        if collection.full:
            break
        if not source.should_include(entry):
            continue
        if entry.is_dir:
            collection.add_directory(entry)
            _collect(source, entry.path, depth + 1, max_depth, collection)
        else:
            collection.add_file(entry, source.fetch_content(entry))
