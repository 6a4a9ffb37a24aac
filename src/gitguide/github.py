"""GitHub repository analyzer.

Lists a public repository through the REST contents API, descending only
into conventional source directories and fetching content for files that
look useful to a README writer.
"""

from __future__ import annotations

import posixpath
import re
import time
from typing import Any, Callable

import httpx

from .errors import (
    InvalidRepositoryURLError,
    PrivateRepositoryError,
    RateLimitError,
    RemoteAPIError,
)
from .local import BINARY_SNIFF_BYTES, MAX_CONTENT_CHARS
from .logging import get_logger
from .models import (
    BINARY,
    DIRECTORY,
    FETCH_FAILED,
    FILE,
    NO_DOWNLOAD_URL,
    NOT_SAMPLED,
    ContentSample,
    Entry,
    FileRecord,
    Repository,
)
from .sources import EntrySource
from . import __version__

logger = get_logger("github")

GITHUB_API_BASE = "https://api.github.com"
REQUEST_TIMEOUT = 30
MAX_RETRIES = 3

MAX_REMOTE_FILES = 50
MAX_FILES_PER_DIRECTORY = 20
SMALL_FILE_SIZE = 10000

REMOTE_IMPORTANT_FILES = frozenset({
    "package.json", "requirements.txt", "Cargo.toml", "go.mod",
    "pom.xml", "Gemfile", "composer.json", "setup.py", "Dockerfile",
    "docker-compose.yml", ".env.example", "config.js", "config.json",
    "logo.png", "logo.svg", "logo.jpg", "logo.jpeg", "icon.png", "icon.svg",
    "brand.png", "brand.svg",
})
NAME_HINTS = ("logo", "icon", "brand", "readme", "license")
DESCEND_DIRECTORIES = frozenset({"src", "app", "lib", "components", "pages", "api"})

_REPO_URL = re.compile(r"github\.com/([^/\s]+)/([^/\s#?]+)")


def parse_repo_url(url: str) -> tuple[str, str]:
    """Return (owner, repo) from a github.com URL."""
    match = _REPO_URL.search(url)
    if not match:
        raise InvalidRepositoryURLError("Invalid GitHub repository URL")
    owner, repo = match.group(1), match.group(2)
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return owner, repo


class GitHubClient:
    """Minimal GitHub REST client with bounded retries."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = GITHUB_API_BASE,
        http_client: httpx.Client | None = None,
        retries: int = MAX_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.retries = retries
        self._sleep = sleep
        self._headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"gitguide/{__version__}",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._client = http_client or httpx.Client(
            timeout=REQUEST_TIMEOUT, follow_redirects=True
        )

    def close(self) -> None:
        self._client.close()

    def fetch(self, url: str) -> httpx.Response:
        """GET with retries and linear backoff.

        403 means rate limiting and fails immediately. Other failures are
        retried, sleeping 1s, 2s, ... between attempts.
        """
        last_error = ""
        for attempt in range(self.retries):
            try:
                resp = self._client.get(url, headers=self._headers)
            except httpx.HTTPError as e:
                last_error = str(e) or type(e).__name__
            else:
                if resp.is_success:
                    return resp
                if resp.status_code == 403:
                    raise RateLimitError(
                        "GitHub API rate limit exceeded. Please try again later."
                    )
                last_error = f"{resp.status_code} {resp.reason_phrase}".strip()

            logger.debug("GET %s failed (attempt %d/%d): %s", url, attempt + 1, self.retries, last_error)
            if attempt < self.retries - 1:
                self._sleep(attempt + 1)

        raise RemoteAPIError(f"GitHub API error: {last_error}")

    def get_json(self, path: str) -> Any:
        resp = self.fetch(f"{self.base_url}/{path.lstrip('/')}")
        try:
            return resp.json()
        except ValueError:
            raise RemoteAPIError(f"GitHub API returned invalid JSON for {path}")

    def get_bytes(self, url: str) -> bytes:
        return self.fetch(url).content


def should_fetch(entry: Entry) -> bool:
    """Name and size heuristic for remote content."""
    if entry.name in REMOTE_IMPORTANT_FILES:
        return True
    lower = entry.name.lower()
    if any(hint in lower for hint in NAME_HINTS):
        return True
    return entry.size < SMALL_FILE_SIZE


class GitHubSource:
    """Contents API provider for one repository."""

    def __init__(self, client: GitHubClient, owner: str, repo: str):
        self.client = client
        self.owner = owner
        self.repo = repo

    def list_entries(self, path: str = "") -> list[Entry]:
        data = self.client.get_json(f"repos/{self.owner}/{self.repo}/contents/{path}")
        if not isinstance(data, list):
            return []
        entries = []
        for item in data:
            kind = {"file": FILE, "dir": DIRECTORY}.get(item.get("type"), item.get("type") or "other")
            entries.append(Entry(
                name=item.get("name", ""),
                path=item.get("path", ""),
                kind=kind,
                size=item.get("size") or 0,
                location=item.get("download_url"),
            ))
        return entries

    def should_include(self, entry: Entry) -> bool:
        # submodules and symlinks are not followed
        return entry.kind in (FILE, DIRECTORY)

    def fetch_content(self, entry: Entry) -> ContentSample:
        if not should_fetch(entry):
            return ContentSample.skipped(NOT_SAMPLED)
        if not entry.location:
            return ContentSample.skipped(NO_DOWNLOAD_URL)
        try:
            data = self.client.get_bytes(entry.location)
        except RemoteAPIError:
            logger.warning("Failed to fetch content for %s", entry.path)
            return ContentSample.skipped(FETCH_FAILED)
        if b"\0" in data[:BINARY_SNIFF_BYTES]:
            ext = posixpath.splitext(entry.name)[1]
            return ContentSample.skipped(BINARY, f"[Binary file: {ext}]")
        return ContentSample.ok(data.decode("utf-8", errors="replace")[:MAX_CONTENT_CHARS])


def collect_remote_files(source: EntrySource, path: str = "") -> list[FileRecord]:
    """Collect one listing, descending into conventional source directories.

    A directory is only taken while this listing holds fewer than
    MAX_REMOTE_FILES records, so directories late in a large listing can be
    dropped. Each descent contributes at most MAX_FILES_PER_DIRECTORY records.
    """
    records: list[FileRecord] = []
    for entry in source.list_entries(path):
        if not source.should_include(entry):
            continue
        if not entry.is_dir:
            records.append(FileRecord.from_sample(entry, source.fetch_content(entry)))
            continue
        if len(records) >= MAX_REMOTE_FILES:
            continue

        records.append(FileRecord.directory(entry.name, entry.path))
        if entry.name.lower() in DESCEND_DIRECTORIES:
            try:
                sub_records = collect_remote_files(source, entry.path)
            except RemoteAPIError:
                logger.warning("Failed to fetch directory %s", entry.path)
                continue
            records.extend(sub_records[:MAX_FILES_PER_DIRECTORY])
    return records


def fetch_repository(url: str, client: GitHubClient) -> Repository:
    """Fetch repository metadata and a bounded file listing."""
    owner, repo = parse_repo_url(url)
    data = client.get_json(f"repos/{owner}/{repo}")
    if not isinstance(data, dict):
        raise RemoteAPIError(f"Unexpected response for {owner}/{repo}")
    if data.get("private"):
        raise PrivateRepositoryError("Repository is private. Please use a public repository.")

    logger.info("Listing %s/%s", owner, repo)
    files = collect_remote_files(GitHubSource(client, owner, repo))

    return Repository(
        name=data.get("name") or repo,
        description=data.get("description") or "",
        language=data.get("language") or "Unknown",
        stars=data.get("stargazers_count") or 0,
        forks=data.get("forks_count") or 0,
        owner=(data.get("owner") or {}).get("login") or owner,
        url=data.get("html_url") or f"https://github.com/{owner}/{repo}",
        files=files,
    )
