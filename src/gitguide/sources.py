"""Source providers: where project entries come from.

A local directory and a GitHub repository expose the same three operations,
so the collectors and the extractor only ever see ``Entry`` and
``FileRecord`` values.
"""

from __future__ import annotations

from typing import Protocol

from .models import ContentSample, Entry


class EntrySource(Protocol):
    """Collection interface shared by local and remote providers."""

    def list_entries(self, path: str = "") -> list[Entry]:
        """List the entries of a directory, relative to the source root."""
        ...

    def should_include(self, entry: Entry) -> bool:
        """Whether an entry belongs in the collection at all."""
        ...

    def fetch_content(self, entry: Entry) -> ContentSample:
        """Capture (or decline to capture) the text of a file entry."""
        ...


def is_remote_target(target: str) -> bool:
    """True when target names a GitHub repository rather than a local path."""
    return "github.com/" in target
