"""Errors that abort an analysis run.

Anything finer grained (an unreadable file, a malformed manifest, a failed
sub-fetch) is absorbed where it happens and never reaches these types.
"""

from __future__ import annotations


class GitGuideError(Exception):
    """Base class for user-facing failures."""


class DirectoryNotFoundError(GitGuideError):
    """Target directory does not exist or is not a directory."""


class InvalidRepositoryURLError(GitGuideError):
    """Repository URL does not look like github.com/<owner>/<repo>."""


class PrivateRepositoryError(GitGuideError):
    """Repository is private and cannot be analyzed."""


class RateLimitError(GitGuideError):
    """GitHub API refused the request (HTTP 403)."""


class RemoteAPIError(GitGuideError):
    """GitHub API kept failing after all retries."""
