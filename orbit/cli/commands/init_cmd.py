from __future__ import annotations

import json

import typer

from orbit.cli.commands._helpers import fail, pick
from orbit.cli.context import build_context
from orbit.core.config import DEFAULT_CONFIG_FILE, Environment, load_config, write_config
from orbit.core.result import Err, Ok
from orbit.output.console import Style
from orbit.services.init import (
    WORKFLOW_PATH,
    InitAnswers,
    build_config,
    detect_environment,
    release_workflow,
    write_release_workflow,
)


def init(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Preview the generated files without writing them."
    ),
) -> None:
    """Create orbit-it.jsonc (and a release workflow for auto releases)."""
    ctx = build_context()
    console = ctx.console

    if dry_run:
        console.info("dry run: nothing will be written")

    match load_config(ctx.root):
        case Ok(existing):
            console.header(f"Found configuration ({existing.path})")
            console.block(json.dumps(existing.to_dict(), indent=2))
            return
        case Err(e) if e.path is not None:
            # A config exists but is broken; never overwrite it.
            fail(e, console)
        case Err(_):
            pass

    project_type = pick(
        console,
        "Select the project type",
        [("monorepo", "Monorepo"), ("single-package", "Single Package")],
        default="single-package",
    )

    environment: Environment | None = detect_environment(ctx.root)
    if environment is None:
        environment = pick(
            console,
            "Select the project environment",
            [("nodejs", "Node.js"), ("python", "Python")],
            default="nodejs",
        )
    else:
        console.print(f"environment: {environment}", Style.DIM)

    workspaces: tuple[str, ...] = (".",)
    if project_type == "monorepo":
        raw = typer.prompt("Workspace globs (comma separated)", default="packages/*")
        workspaces = tuple(w.strip() for w in raw.split(",") if w.strip()) or (".",)

    strategy = pick(
        console,
        "Select the release strategy",
        [("auto", "Auto"), ("manual", "Manual")],
        default="manual",
    )
    versioning = pick(
        console,
        "Select the versioning strategy",
        [("fixed", "Fixed"), ("independent", "Independent")],
        default="fixed",
    )
    identifier = typer.prompt("Pre-release identifier (empty for none)", default="beta")

    built = build_config(
        ctx.root,
        InitAnswers(
            project_type=project_type,
            environment=environment,
            strategy=strategy,
            versioning_strategy=versioning,
            prerelease_identifier=identifier.strip() or None,
            workspaces=workspaces,
        ),
    )
    if isinstance(built, Err):
        fail(built.error, console)
    config = built.value

    if dry_run:
        console.header(f"{DEFAULT_CONFIG_FILE} (not written)")
        console.block(json.dumps(config.to_dict(), indent=2))
        if strategy == "auto":
            console.header(f"{WORKFLOW_PATH.as_posix()} (not written)")
            console.block(release_workflow(config))
        return

    written = write_config(ctx.root, config)
    if isinstance(written, Err):
        fail(written.error, console)
    console.success(f"wrote {written.value.name}")

    if strategy == "auto":
        workflow = write_release_workflow(ctx.root, config)
        if isinstance(workflow, Err):
            fail(workflow.error, console)
        console.success(f"wrote {WORKFLOW_PATH.as_posix()}")
        console.print("releases will run on every push to main", Style.DIM)
