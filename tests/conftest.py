"""Shared fixtures: sample project trees and an in-memory GitHub API."""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from gitguide.github import GitHubClient

API_BASE = "https://api.github.test"
RAW_HOST = "raw.github.test"


class FakeGitHub:
    """In-memory GitHub REST API served through httpx.MockTransport."""

    def __init__(self, owner: str = "octo", repo: str = "demo", **meta):
        self.owner = owner
        self.repo = repo
        self.meta = {
            "name": repo,
            "description": "A demo repository",
            "language": "TypeScript",
            "stargazers_count": 42,
            "forks_count": 7,
            "private": False,
            "owner": {"login": owner},
            "html_url": f"https://github.com/{owner}/{repo}",
            **meta,
        }
        self.listings: dict[str, list[dict]] = {"": []}
        self.raw: dict[str, bytes] = {}
        self.failures: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def _parent(self, path: str) -> str:
        return path.rsplit("/", 1)[0] if "/" in path else ""

    def add_file(self, path: str, content: bytes | str = b"", size: int | None = None, download: bool = True):
        data = content.encode() if isinstance(content, str) else content
        self.raw[path] = data
        self.listings.setdefault(self._parent(path), []).append({
            "type": "file",
            "name": path.rsplit("/", 1)[-1],
            "path": path,
            "size": len(data) if size is None else size,
            "download_url": f"https://{RAW_HOST}/{self.owner}/{self.repo}/main/{path}" if download else None,
        })

    def add_dir(self, path: str):
        self.listings.setdefault(path, [])
        self.listings.setdefault(self._parent(path), []).append({
            "type": "dir",
            "name": path.rsplit("/", 1)[-1],
            "path": path,
            "size": 0,
            "download_url": None,
        })

    def fail(self, url_path: str, status: int):
        self.failures[url_path] = status

    def paths_requested(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.failures:
            return httpx.Response(self.failures[path])

        if request.url.host == RAW_HOST:
            rel = path.split("/main/", 1)[1]
            if rel in self.raw:
                return httpx.Response(200, content=self.raw[rel])
            return httpx.Response(404)

        repo_path = f"/repos/{self.owner}/{self.repo}"
        if path == repo_path:
            return httpx.Response(200, json=self.meta)
        contents = f"{repo_path}/contents"
        if path.startswith(contents):
            rel = path[len(contents):].strip("/")
            if rel in self.listings:
                return httpx.Response(200, json=self.listings[rel])
        return httpx.Response(404, json={"message": "Not Found"})

    def client(self, token: str | None = None, sleeps: list | None = None) -> GitHubClient:
        record = sleeps.append if sleeps is not None else (lambda seconds: None)
        return GitHubClient(
            token=token,
            base_url=API_BASE,
            http_client=httpx.Client(transport=httpx.MockTransport(self.handler)),
            sleep=record,
        )


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def sample_next_repo(tmp_path):
    """Next.js project with a large node_modules tree."""
    root = tmp_path / "demo-app"
    root.mkdir()
    (root / "package.json").write_text(
        json.dumps({"name": "demo", "dependencies": {"next": "1.0"}})
    )
    src = root / "src"
    src.mkdir()
    (src / "index.js").write_text("export default function main() { return 1; }\n// x\n")

    modules = root / "node_modules"
    modules.mkdir()
    for i in range(500):
        (modules / f"dep{i}.js").write_text("module.exports = {};\n")
    return root


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.gitguide."""
    config_dir = tmp_path / "gitguide-config"
    monkeypatch.setenv("GITGUIDE_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() so caplog sees gitguide records."""
    yield
    logger = logging.getLogger("gitguide")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
