"""Prompt templates for README generation."""

from __future__ import annotations

SYSTEM_PROMPT = """You are an experienced open-source maintainer writing README files.
Write clear, accurate GitHub-flavored markdown.
Only describe features, commands and files that appear in the provided project data.
Prefer concrete install and usage instructions over marketing language.
Output the README itself, with no commentary before or after it."""


def readme_prompt(context: str, key_files: list[tuple[str, str]] | None = None) -> str:
    """Generate the prompt for a full README."""
    files_block = ""
    if key_files:
        files_block = "KEY FILES:\n" + "\n".join(
            f"--- {path} ---\n{content[:1500]}" for path, content in key_files
        )

    return f"""Write a README.md for this project.

PROJECT ANALYSIS:
{context}

{files_block}

Use this structure, dropping any section the project data gives you nothing to say about:

# <project name>

<one paragraph: what the project is and who it is for>

## Features
<bullet list of concrete capabilities>

## Installation
<commands based on the detected package manager and manifest>

## Usage
<how to run or import it, with a short example>

## Project Structure
<the main directories and what lives in them>

## Configuration
<environment variables or config files, only if present>

## Contributing
<short, standard guidance>

## License
<license name if one is present, otherwise omit this section>

Keep it under 900 words."""
