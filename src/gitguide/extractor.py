"""Project info extraction from collected file records.

Reads package.json when it was sampled, then lets ecosystem marker files
have the final word on the language.
"""

from __future__ import annotations

import json
from typing import Iterable

from .logging import get_logger
from .models import FileRecord, ProjectInfo

logger = get_logger("extractor")

MANIFEST_FILE = "package.json"

# Checked in order; first dependency present decides the label.
NODE_FRAMEWORKS = (
    ("react", "JavaScript/React"),
    ("vue", "JavaScript/Vue"),
    ("next", "JavaScript/Next.js"),
)
NODE_DEFAULT = "JavaScript/Node.js"

# Checked in order; first marker present wins over the manifest.
LANGUAGE_MARKERS = (
    (("requirements.txt", "setup.py", "pyproject.toml", "Pipfile"), "Python"),
    (("Cargo.toml",), "Rust"),
    (("go.mod",), "Go"),
    (("pom.xml", "build.gradle"), "Java"),
    (("Gemfile",), "Ruby"),
    (("composer.json",), "PHP"),
)


def extract_project_info(root_name: str, files: Iterable[FileRecord]) -> ProjectInfo:
    """Infer name, description, language and version. Never raises."""
    files = list(files)
    info = ProjectInfo(name=root_name)

    manifest = next((f for f in files if f.is_file and f.name == MANIFEST_FILE), None)
    if manifest is not None and manifest.has_content:
        _apply_package_json(manifest.content, info)

    names = {f.name for f in files if f.is_file}
    for markers, language in LANGUAGE_MARKERS:
        if any(m in names for m in markers):
            info.language = language
            break

    return info


def _apply_package_json(content: str, info: ProjectInfo) -> None:
    try:
        pkg = json.loads(content)
    except (ValueError, RecursionError) as e:
        logger.debug("Ignoring malformed %s: %s", MANIFEST_FILE, e)
        return
    if not isinstance(pkg, dict):
        return

    info.name = _text(pkg.get("name")) or info.name
    info.description = _text(pkg.get("description")) or info.description
    info.version = _text(pkg.get("version")) or info.version

    sections = [
        pkg[key] for key in ("dependencies", "devDependencies")
        if isinstance(pkg.get(key), dict)
    ]

    info.language = NODE_DEFAULT
    for dep, label in NODE_FRAMEWORKS:
        if any(section.get(dep) for section in sections):
            info.language = label
            break


def _text(value) -> str:
    return value if isinstance(value, str) else ""
