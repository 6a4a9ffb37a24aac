"""README generator - turns ProjectData into a markdown document.

Builds the prompt from the analysis, calls the local model once and
normalizes what comes back.
"""

from __future__ import annotations

import re

from .github import REMOTE_IMPORTANT_FILES
from .local import IMPORTANT_FILES
from .logging import get_logger
from .model import ModelError, OllamaClient
from .models import GeneratedReadme, ProjectData
from .prompts import SYSTEM_PROMPT, readme_prompt

logger = get_logger("generator")

KEY_FILE_NAMES = frozenset(IMPORTANT_FILES) | REMOTE_IMPORTANT_FILES | {"README.md"}
MAX_KEY_FILES = 5

_FENCE_OPEN = re.compile(r"^```(?:markdown|md)?[ \t]*\n", re.IGNORECASE)
_SECTION = re.compile(r"^##[ \t]+(.+?)[ \t#]*$", re.MULTILINE)


class ReadmeGenerator:
    """Generates a README for an analyzed project."""

    def __init__(self, client: OllamaClient):
        self.client = client

    def generate(self, project: ProjectData) -> GeneratedReadme:
        key_files = project.key_files(KEY_FILE_NAMES, limit=MAX_KEY_FILES)
        prompt = readme_prompt(project.summary_for_prompt(), key_files)
        logger.debug("Prompt for %s is %d characters", project.name, len(prompt))

        content = _strip_fence(self.client.generate(prompt, system=SYSTEM_PROMPT))
        if not content:
            raise ModelError("Model returned an empty README")
        return GeneratedReadme(content=content + "\n", sections=extract_sections(content))


def extract_sections(content: str) -> list[str]:
    """Ordered second-level heading texts."""
    return [m.group(1).strip() for m in _SECTION.finditer(content)]


def _strip_fence(content: str) -> str:
    """Remove a ```markdown fence wrapping the whole document."""
    content = content.strip()
    match = _FENCE_OPEN.match(content)
    if match and content.endswith("```"):
        content = content[match.end():-3].strip()
    return content
