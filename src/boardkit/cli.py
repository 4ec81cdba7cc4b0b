"""Command line interface for BoardKit.

Commands:
- serve: run the HTTP API
- templates: list built-in templates
- generate: apply a template to a repository, optionally with a project board
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import uvicorn
from tqdm import tqdm

from boardkit import __version__
from boardkit.board import (
    BoardColumn,
    BoardConfiguration,
    BoardType,
    PhaseColumnMapping,
    with_preset_columns,
)
from boardkit.config import ConfigError, Settings, load_settings
from boardkit.generation import BoardGenerator, GenerationProgress, Throttle
from boardkit.github import GitHubError, GitHubGraphClient, GitHubRestClient
from boardkit.logging import get_logger, setup_logging
from boardkit.templates import Template, TemplateCatalog, TemplateError, parse_template

logger = get_logger("cli")


class ProgressBars:
    """Renders generation progress as one tqdm bar per stage."""

    def __init__(self, disable: bool = False) -> None:
        self.disable = disable
        self._bar: tqdm | None = None
        self._stage: str | None = None

    def __call__(self, event: GenerationProgress) -> None:
        stage, _, detail = event.phase.partition(" - ")
        if stage != self._stage or self._bar is None:
            self.close()
            self._stage = stage
            self._bar = tqdm(total=event.total, desc=stage, unit="item", disable=self.disable)
        if detail:
            self._bar.set_postfix_str(detail)
        self._bar.update(1)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


def parse_repository(value: str) -> tuple[str, str]:
    """Split ``owner/repo``."""
    owner, sep, repo = value.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise click.BadParameter(f"expected OWNER/REPO, got {value!r}")
    return owner, repo


def parse_mapping(values: tuple[str, ...]) -> tuple[PhaseColumnMapping, ...]:
    """Parse ``PHASE=COLUMN`` pairs."""
    mappings = []
    for value in values:
        phase, sep, column = value.partition("=")
        if not sep or not phase.strip() or not column.strip():
            raise click.BadParameter(f"expected PHASE=COLUMN, got {value!r}")
        mappings.append(PhaseColumnMapping(phase.strip(), column.strip()))
    return tuple(mappings)


def _load_settings() -> Settings:
    try:
        return load_settings()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """BoardKit - generate GitHub labels, issues and project boards from templates."""
    pass


@main.command()
@click.option("--host", default=None, help="Bind address (default: BOARDKIT_HOST or 127.0.0.1)")
@click.option("--port", type=int, default=None, help="Bind port (default: BOARDKIT_PORT or 8000)")
def serve(host: str | None, port: int | None) -> None:
    """Run the HTTP API."""
    from boardkit.api import create_app

    setup_logging()
    settings = _load_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=host or settings.host,
        port=port or settings.port,
    )


@main.command("templates")
@click.option("--category", default=None, help="Only list templates in this category")
def list_templates(category: str | None) -> None:
    """List built-in templates."""
    settings = _load_settings()
    try:
        catalog = TemplateCatalog.load(settings.templates_dir)
    except TemplateError as e:
        click.echo(f"Template error: {e}", err=True)
        sys.exit(1)

    templates = catalog.list_templates(category=category)
    if not templates:
        click.echo("No templates found.")
        return
    for template in templates:
        click.echo(
            f"{template.id:<24} {template.category:<14} "
            f"{template.issue_count:>3} issues  {template.name}"
        )


def _resolve_template(
    settings: Settings, template_id: str | None, template_file: Path | None
) -> Template:
    if (template_id is None) == (template_file is None):
        raise click.UsageError("Provide exactly one of --template or --template-file")
    if template_file is not None:
        try:
            data = json.loads(template_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise click.UsageError(f"{template_file}: not valid JSON: {e}") from e
        return parse_template(data)
    return TemplateCatalog.load(settings.templates_dir).get(str(template_id))


@main.command()
@click.argument("repository")
@click.option("-t", "--template", "template_id", default=None, help="Built-in template id")
@click.option(
    "-f",
    "--template-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Template JSON file",
)
@click.option(
    "--board",
    "board_type",
    type=click.Choice([t.value for t in BoardType], case_sensitive=False),
    default=BoardType.NONE.value,
    help="Board to create (default: none)",
)
@click.option("--board-name", default="", help="Project title (default: '<template> Board')")
@click.option("--column", "columns", multiple=True, help="Board column, in order (repeatable)")
@click.option(
    "--map",
    "mappings",
    multiple=True,
    help="Route a phase to a column as PHASE=COLUMN (repeatable)",
)
@click.option("--no-progress", is_flag=True, help="Hide progress bars")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
def generate(
    repository: str,
    template_id: str | None,
    template_file: Path | None,
    board_type: str,
    board_name: str,
    columns: tuple[str, ...],
    mappings: tuple[str, ...],
    no_progress: bool,
    as_json: bool,
) -> None:
    """Apply a template to REPOSITORY (OWNER/REPO)."""
    owner, repo = parse_repository(repository)
    settings = _load_settings()
    if not settings.github_token:
        click.echo("Error: no GitHub token (set GITHUB_TOKEN or run `gh auth login`)", err=True)
        sys.exit(1)

    try:
        template = _resolve_template(settings, template_id, template_file)
    except TemplateError as e:
        click.echo(f"Template error: {e}", err=True)
        sys.exit(1)

    try:
        board_config = with_preset_columns(
            BoardConfiguration(
                enabled=board_type != BoardType.NONE.value,
                board_type=BoardType(board_type.lower()),
                board_name=board_name,
                columns=tuple(BoardColumn(name) for name in columns),
                phase_mapping=parse_mapping(mappings),
            )
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    rest = GitHubRestClient(token=settings.github_token, base_url=settings.api_url)
    graph = GitHubGraphClient(token=settings.github_token, base_url=settings.graphql_url)
    progress = ProgressBars(disable=no_progress or as_json)
    try:
        if not rest.verify_access(owner, repo):
            click.echo(f"Error: no access to {owner}/{repo}", err=True)
            sys.exit(1)
        generator = BoardGenerator(
            issues=rest,
            projects=graph,
            throttle=Throttle(settings.throttle_seconds),
            placement_policy=settings.placement_policy,
        )
        logger.info("Applying template %s to %s/%s", template.id, owner, repo)
        result = generator.generate(owner, repo, template, board_config, progress=progress)
    except GitHubError as e:
        logger.error("Generation for %s/%s aborted: %s", owner, repo, e)
        click.echo(f"GitHub error: {e}", err=True)
        sys.exit(1)
    finally:
        progress.close()
        rest.close()
        graph.close()

    if as_json:
        click.echo(json.dumps(result.to_summary(), indent=2))
        return

    click.echo(f"Labels: {result.labels_created} created, {result.labels_updated} updated")
    click.echo(f"Issues: {result.issues_created} created, {result.issues_skipped} skipped")
    if result.project_url:
        click.echo(f"Project board: {result.project_url}")
    for warning in result.warnings:
        click.echo(f"Warning: {warning}", err=True)
    for failure in result.failures:
        click.echo(f"Failed: {failure}", err=True)
