"""Analysis entry points: target in, ProjectData out."""

from __future__ import annotations

from pathlib import Path

from .errors import DirectoryNotFoundError
from .extractor import extract_project_info
from .github import GitHubClient, fetch_repository
from .local import collect_files, scan_structure
from .logging import get_logger
from .models import DEFAULT_LANGUAGE, ProjectData, Repository, StructureSummary
from .sources import is_remote_target

logger = get_logger("analyzer")


def analyze_directory(path: str | Path) -> ProjectData:
    """Run the local analyzer over a directory."""
    root = Path(path).resolve()
    if not root.is_dir():
        raise DirectoryNotFoundError(f"Directory not found: {root}")

    structure = scan_structure(root)
    files = collect_files(root)
    info = extract_project_info(root.name, files)
    logger.debug(
        "Analyzed %s: %d files, %d directories, %d records collected",
        root, structure.files, structure.directories, len(files),
    )
    return ProjectData.build(str(root), info, files, structure)


def project_data_from_repository(repo: Repository) -> ProjectData:
    """Convert a fetched repository into the shape the generator expects.

    The API's own description and language win over what the collected
    files suggest.
    """
    info = extract_project_info(repo.name, repo.files)
    if repo.description:
        info.description = repo.description
    if repo.language and repo.language != DEFAULT_LANGUAGE:
        info.language = repo.language
    structure = StructureSummary.from_records(repo.files)
    return ProjectData.build(repo.url, info, repo.files, structure)


def analyze_repository(
    url: str,
    client: GitHubClient | None = None,
    token: str | None = None,
) -> ProjectData:
    """Run the remote analyzer over a public GitHub repository."""
    own_client = client is None
    client = client or GitHubClient(token=token)
    try:
        repo = fetch_repository(url, client)
    finally:
        if own_client:
            client.close()
    return project_data_from_repository(repo)


def analyze(target: str, token: str | None = None) -> ProjectData:
    """Analyze a local path or a GitHub URL."""
    if is_remote_target(target):
        return analyze_repository(target, token=token)
    return analyze_directory(target)
