from __future__ import annotations

import typer

from orbit.cli.commands._helpers import fail, fail_with, pick
from orbit.cli.context import build_context
from orbit.core.config import load_config
from orbit.core.credentials import load_token
from orbit.core.result import Err
from orbit.git.repository import Repository
from orbit.output.console import Style
from orbit.services.release.errors import ReleaseError
from orbit.services.release.github import GitHubClient
from orbit.services.release.model import RELEASE_TYPES, ReleaseRequest, ReleaseType
from orbit.services.release.service import ReleaseOrchestrator


def _parse_release_type(value: str) -> ReleaseType | None:
    for candidate in RELEASE_TYPES:
        if candidate == value.strip().lower():
            return candidate
    return None


def release(
    release_type: str | None = typer.Option(
        None,
        "--type",
        help="Release type: major, minor, patch or prerelease.",
    ),
    draft: bool = typer.Option(False, "--draft", help="Create a draft GitHub release."),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Compute and print the release without writing anything."
    ),
    ci: bool = typer.Option(False, "--ci", help="Non-interactive mode (requires --type)."),
) -> None:
    """Release a new version of the project."""
    ctx = build_context()
    console = ctx.console

    config = load_config(ctx.root)
    if isinstance(config, Err):
        fail(config.error, console)

    kind: ReleaseType | None = None
    if release_type is not None:
        kind = _parse_release_type(release_type)
        if kind is None:
            fail_with(
                f"invalid --type '{release_type}' (expected one of {', '.join(RELEASE_TYPES)})",
                console,
            )

    if ci:
        if kind is None:
            fail_with("Missing release type (--ci requires --type)", console)
        console.info("CI mode: prompts disabled")
    else:
        if not typer.confirm("Do you want to continue?", default=True):
            console.warning("release cancelled")
            return
        kind = pick(
            console,
            "Select the release type",
            [(t, t.capitalize()) for t in RELEASE_TYPES],
            default=kind or "patch",
        )
        dry_run = dry_run or typer.confirm("Run in dry-run mode?", default=False)
        draft = draft or typer.confirm("Create a draft release?", default=False)

    if dry_run:
        console.info("dry run: no files, tags or releases will be written")

    token = load_token(ctx.root)
    if isinstance(token, Err):
        e = token.error
        fail(ReleaseError(kind="authentication", message=e.message, hints=e.hints), console)

    orchestrator = ReleaseOrchestrator(
        config=config.value,
        project_root=ctx.root,
        repo=Repository(ctx.root),
        github=GitHubClient(ctx.http(token.value)),
        console=console,
    )
    result = orchestrator.run(ReleaseRequest(release_type=kind, draft=draft, dry_run=dry_run))
    if isinstance(result, Err):
        fail(result.error, console)

    outcome = result.value
    console.newline()
    for r in outcome.releases:
        console.print(f"Tag: {r.tag_name}", Style.BOLD)
        console.print(f"Version: {r.version}", Style.BOLD)
    if outcome.dry_run:
        console.warning("dry run complete")
    else:
        console.success(f"{len(outcome.releases)} release(s) published")
