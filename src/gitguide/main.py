"""GitGuide CLI - README generator for any project directory.

Usage:
    gitguide generate [-d DIR] [-o README.md] [--force]
    gitguide gen --repo https://github.com/owner/repo
    gitguide analyze . --json
    gitguide config
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.tree import Tree

from . import __version__
from .analyzer import analyze as run_analysis
from .analyzer import analyze_directory, analyze_repository
from .config import get_token, load_config, set_token
from .errors import GitGuideError
from .generator import ReadmeGenerator
from .logging import configure_logging
from .model import DEFAULT_MODEL, OllamaClient
from .models import DIRECTORY, ProjectData

console = Console()

MIN_TOKEN_LENGTH = 20
PREVIEW_CHARS = 1500


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """GitGuide - AI README generator.

    Analyzes a project directory or a public GitHub repository and writes
    a README with a local Ollama model.
    """
    configure_logging(verbose=verbose)


@cli.command()
@click.option("--directory", "-d", default=".", help="Target directory (default: current directory)")
@click.option("--repo", "-r", default=None, help="Public GitHub repository URL to document instead")
@click.option("--output", "-o", default="README.md", help="Output filename (default: README.md)")
@click.option("--force", is_flag=True, help="Overwrite an existing output file")
@click.option("--model", "-m", default=None, help="Ollama model name")
@click.option("--preview", is_flag=True, help="Print the start of the generated README")
def generate(directory: str, repo: str | None, output: str, force: bool, model: str | None, preview: bool):
    """Generate a README for a directory or GitHub repository.

    Examples:

        gitguide generate

        gitguide gen -d ./my-project

        gitguide gen --output DOCUMENTATION.md --force

        gitguide gen --repo https://github.com/pallets/flask
    """
    config = load_config()
    model = model or config.model or DEFAULT_MODEL

    target_dir = None
    if repo:
        out_path = Path(output).resolve()
    else:
        target_dir = Path(directory).resolve()
        if not target_dir.is_dir():
            raise click.ClickException(f"Directory not found: {target_dir}")
        out_path = target_dir / output

    if out_path.exists() and not force:
        if not click.confirm(f"{output} already exists. Overwrite?", default=False):
            console.print("[blue]Operation cancelled.[/]")
            return

    console.print()
    console.print(Panel.fit(
        f"[bold cyan]GitGuide v{__version__}[/] - Generating README",
        border_style="cyan",
    ))
    console.print(f"Target: [cyan]{repo or target_dir}[/]")
    console.print(f"Output file: [cyan]{out_path}[/]")

    try:
        with console.status("Analyzing project structure..."):
            if repo:
                project = analyze_repository(repo, token=config.api_key)
            else:
                project = analyze_directory(target_dir)
        console.print(
            f"[green]Analysis complete[/] - {len(project.files)} records across "
            f"{project.structure.directories} directories"
        )

        client = OllamaClient(model=model)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Setting up model...", total=None)

            def on_setup_progress(status, completed, total):
                progress.update(task, description=status)

            client.ensure_ready(progress_callback=on_setup_progress)
            progress.update(task, description=f"Writing README with {model}...")
            readme = ReadmeGenerator(client).generate(project)
    except GitGuideError as e:
        raise click.ClickException(str(e))

    try:
        out_path.write_text(readme.content, encoding="utf-8")
    except OSError as e:
        raise click.ClickException(f"Cannot write {out_path}: {e.strerror or e}")

    console.print()
    console.print("[bold green]README generated successfully![/]")
    console.print(f"Location: [cyan]{out_path}[/]")
    if readme.sections:
        console.print(f"Sections: [dim]{', '.join(readme.sections)}[/]")

    if preview:
        console.print()
        console.rule("Preview")
        console.print(Markdown(readme.content[:PREVIEW_CHARS]))
        if len(readme.content) > PREVIEW_CHARS:
            console.print("[dim]...(truncated)[/]")
        console.rule()


cli.add_command(generate, name="gen")


@cli.command()
@click.argument("target", default=".")
@click.option("--json", "as_json", is_flag=True, help="Print the analysis as JSON")
def analyze(target: str, as_json: bool):
    """Analyze a directory or GitHub URL without generating anything.

    TARGET can be a local path or a github.com repository URL.
    """
    try:
        project = run_analysis(target, token=get_token())
    except GitGuideError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(project.to_dict(), indent=2))
        return
    _print_analysis_summary(project)


@cli.command("config")
@click.option("--clear", is_flag=True, help="Remove the stored token")
def configure(clear: bool):
    """Store a GitHub token for repository analysis."""
    if clear:
        path = set_token(None)
        console.print(f"[green]Token removed[/] ({path})")
        return

    current = get_token()
    if current:
        console.print(f"Current token: [dim]{'*' * 20}{current[-8:]}[/]")
        if not click.confirm("Do you want to update your token?", default=False):
            console.print("[blue]Configuration unchanged.[/]")
            return

    console.print("Create a token at: [cyan]https://github.com/settings/tokens[/]")
    console.print("[dim]The token is stored locally and only sent to the GitHub API.[/]")
    token = click.prompt("GitHub token", hide_input=True, value_proc=_validate_token)
    path = set_token(token)
    console.print(f"[green]Token saved[/] to {path}")


def _validate_token(value: str) -> str:
    value = value.strip()
    if not value:
        raise click.BadParameter("Token is required")
    if len(value) < MIN_TOKEN_LENGTH:
        raise click.BadParameter("Token seems too short. Please check and try again.")
    return value


def _print_analysis_summary(project: ProjectData) -> None:
    """Print a compact summary of the analysis."""
    table = Table(title="Project Analysis", show_header=False, border_style="dim")
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Name", project.name)
    if project.description:
        table.add_row("Description", project.description[:80])
    table.add_row("Language", project.language)
    table.add_row("Version", project.version)
    table.add_row(
        "Files / Dirs",
        f"{project.structure.files:,} / {project.structure.directories:,}",
    )
    top = project.structure.top_extensions(6)
    if top:
        table.add_row("File types", ", ".join(f"{ext} ({n})" for ext, n in top))
    table.add_row("Collected", str(len(project.files)))
    console.print(table)

    tree = Tree("[bold]Top level[/]")
    for record in project.files:
        if "/" in record.path:
            continue
        if record.kind == DIRECTORY:
            tree.add(f"[bold]{record.name}/[/]")
        else:
            tree.add(f"{record.name} [dim]({record.size:,} bytes)[/]")
    console.print(tree)


if __name__ == "__main__":
    cli()
