"""Click-based CLI for scmapp - stage, commit and push in one command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click

from scmapp import __version__
from scmapp.config import ensure_config_exists, get_config_path, load_config
from scmapp.errors import ScmError
from scmapp.logger import ScmLogger
from scmapp.output import Console, create_console
from scmapp.workflow import StageRequest, Workflow, open_workflow


def _console(ctx: click.Context) -> Console:
    return ctx.obj["console"]


def _fail(ctx: click.Context, message: str) -> NoReturn:
    _console(ctx).print_error(message)
    sys.exit(1)


def _open(ctx: click.Context) -> Workflow:
    """Open the repository selected by the global options."""
    logger = ScmLogger(_console(ctx).rich, verbose=ctx.obj["verbose"])
    try:
        return open_workflow(ctx.obj["repo_path"], ctx.obj["config_path"], logger)
    except ScmError as e:
        _fail(ctx, e.message)


def _push(ctx: click.Context, request: StageRequest, amend: bool) -> None:
    workflow = _open(ctx)
    if amend:
        workflow.logger.warning("Amend/Force flag is set. This will amend last commit and force push to remote!")

    try:
        result = workflow.scp_changes(request, should_amend=amend)
    except ScmError as e:
        _fail(ctx, e.message)

    if not result.success:
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="scm")
@click.option("--repo-path", type=click.Path(path_type=Path), default=None, help="Path of the repo")
@click.option(
    "--config-file-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path of the json (or yaml) configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.pass_context
def cli(ctx: click.Context, repo_path: Optional[Path], config_file_path: Optional[Path], verbose: bool) -> None:
    """scm - Stage, commit and push in one command.

    \b
    The commit message is read from the commit log file configured in
    ~/.config/scmapp/config.json (default: commit.log in the repo root).
    """
    ctx.ensure_object(dict)
    ctx.obj["repo_path"] = repo_path
    ctx.obj["config_path"] = config_file_path
    ctx.obj["verbose"] = verbose
    ctx.obj["console"] = create_console(verbose=verbose)


# ============================================================================
# Push Commands
# ============================================================================


@cli.group()
def push() -> None:
    """Commit and push."""
    pass


amend_option = click.option("--amend", "-f", is_flag=True, help="Amend last commit and force push!")


@push.command("mod")
@amend_option
@click.pass_context
def push_mod(ctx: click.Context, amend: bool) -> None:
    """Add only modified files to commit and push."""
    _push(ctx, StageRequest.update(), amend)


@push.command("single")
@click.argument("file_path")
@amend_option
@click.pass_context
def push_single(ctx: click.Context, file_path: str, amend: bool) -> None:
    """Add a file to commit and push.

    FILE_PATH is relative to the repository root, or absolute.
    """
    _push(ctx, StageRequest.single(file_path), amend)


@push.command("all")
@amend_option
@click.pass_context
def push_all(ctx: click.Context, amend: bool) -> None:
    """Add all files to commit and push."""
    _push(ctx, StageRequest.all(), amend)


push.add_command(push_mod, name="modified")
push.add_command(push_single, name="single-file")


# ============================================================================
# Pull, Info and Status
# ============================================================================


@cli.command()
@click.option("--upstream", "-u", is_flag=True, help="Pull from upstream")
@click.option("--branch", "-b", default=None, help="Upstream branch to pull (default from config: main)")
@click.pass_context
def pull(ctx: click.Context, upstream: bool, branch: Optional[str]) -> None:
    """Pull changes from repository."""
    workflow = _open(ctx)
    try:
        outcome = workflow.pull(from_upstream=upstream, upstream_branch=branch)
    except ScmError as e:
        _fail(ctx, e.message)

    if not outcome.success:
        sys.exit(1)


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show information about repository."""
    workflow = _open(ctx)
    try:
        repo_info = workflow.repository_info()
    except ScmError as e:
        _fail(ctx, e.message)

    _console(ctx).print_repo_info(repo_info)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show status on changes (including commit message)."""
    workflow = _open(ctx)
    try:
        report = workflow.status_report()
    except ScmError as e:
        _fail(ctx, e.message)

    _console(ctx).print_status(report)


cli.add_command(info, name="information")
cli.add_command(status, name="stat")


# ============================================================================
# Remote and Branch Commands
# ============================================================================


@cli.command("set-url")
@click.argument("remote_url")
@click.option("--upstream", "-u", is_flag=True, help="Set remote upstream URL!")
@click.pass_context
def set_url(ctx: click.Context, remote_url: str, upstream: bool) -> None:
    """Update remote origin URL."""
    workflow = _open(ctx)
    try:
        workflow.set_url(remote_url, upstream=upstream)
    except ScmError as e:
        _fail(ctx, e.message)


@cli.command("delete-branch")
@click.argument("branch_name")
@click.pass_context
def delete_branch(ctx: click.Context, branch_name: str) -> None:
    """Delete branch from local and remote."""
    workflow = _open(ctx)
    try:
        result = workflow.delete_branch(branch_name)
    except ScmError as e:
        _fail(ctx, e.message)

    if not result.success:
        sys.exit(1)


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group()
def config() -> None:
    """Configuration file management."""
    pass


@config.command("init")
@click.pass_context
def config_init(ctx: click.Context) -> None:
    """Create the configuration file with default values."""
    path, created = ensure_config_exists(ctx.obj["config_path"])
    _console(ctx).print_config_summary(str(path), created)


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration (token hidden)."""
    path = ctx.obj["config_path"] or get_config_path()
    try:
        loaded = load_config(path)
    except ScmError as e:
        _fail(ctx, e.message)

    data = loaded.model_dump(mode="json")
    if data["credentials"]["token"]:
        data["credentials"]["token"] = "********"
    console = _console(ctx)
    console.print(f"[dim]{path}{'' if path.exists() else ' (not found, defaults)'}[/dim]")
    console.rich.print_json(data=data)


if __name__ == "__main__":
    cli()
