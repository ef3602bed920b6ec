from __future__ import annotations

from pathlib import Path
from typing import Callable, Mapping, NoReturn, Optional

import typer

from kepctl.config import KepctlConfig, normalize_name_list, resolve_config
from kepctl.exceptions import KepctlError, ValidationError
from kepctl.kep_ref import parse_kep_ref
from kepctl.layout import init_release
from kepctl.manifest import generate_manifest
from kepctl.placement import propose_kep_ref
from kepctl.repo import find_enhancements_repo
from kepctl.versions import parse_version

app = typer.Typer(add_completion=False, help="Manage enhancement proposals for a release.")


def _context_echo(ctx: typer.Context) -> Callable[[str], None]:
    obj = ctx.obj
    if isinstance(obj, Mapping):
        candidate = obj.get("echo")
        if callable(candidate):
            return candidate
    return typer.echo


def _fail(exc: KepctlError) -> NoReturn:
    if isinstance(exc, ValidationError):
        raise typer.BadParameter(str(exc)) from exc
    typer.secho(str(exc), err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1) from exc


def _resolve(config: Path | None, repo_path: Path | None) -> tuple[KepctlConfig, Path]:
    settings = resolve_config(config_path=config)
    return settings, find_enhancements_repo(repo_path, config=settings)


@app.command("init-release")
def init_release_command(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="Release version, ex: v1.21"),
    enhancement_team: list[str] = typer.Option(
        [],
        "--enhancement-team",
        help="Enhancement Team Members (repeatable or comma-separated).",
    ),
    release_leads: list[str] = typer.Option(
        [],
        "--release-leads",
        help="Release Leads (repeatable or comma-separated).",
    ),
    repo_path: Optional[Path] = typer.Option(None, "--repo-path", help="Path to the enhancements repo."),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Initialize a new release and create the required folder structure."""
    echo_fn = _context_echo(ctx)
    try:
        parse_version(version)
        settings, root = _resolve(config, repo_path)
        team = normalize_name_list(enhancement_team) or list(settings.enhancement_team)
        leads = normalize_name_list(release_leads) or list(settings.release_leads)
        init_release(root, version, team, leads, echo_fn=echo_fn)
    except KepctlError as exc:
        _fail(exc)


@app.command("propose")
def propose_command(
    ctx: typer.Context,
    kep: str = typer.Argument(..., help="KEP to target, ex: sig-architecture/000-mykep"),
    release: str = typer.Option("", "--release", help="Release To Target"),
    stage: str = typer.Option("", "--stage", help="Stage KEP will be promoted to"),
    repo_path: Optional[Path] = typer.Option(None, "--repo-path", help="Path to the enhancements repo."),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Target a KEP for a release by writing a receipt into its proposed folder."""
    echo_fn = _context_echo(ctx)
    try:
        ref = parse_kep_ref(kep)
        if not release.strip():
            raise ValidationError("target release is required to propose a KEP for a release")
        if not stage.strip():
            raise ValidationError("stage required to target the release")
        settings, root = _resolve(config, repo_path)
        propose_kep_ref(
            root,
            release.strip(),
            ref,
            stage.strip(),
            kep_base=settings.kep_base,
            issue_base=settings.issue_base,
            echo_fn=echo_fn,
        )
    except KepctlError as exc:
        _fail(exc)


@app.command("generate-manifest")
def generate_manifest_command(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="Release version, ex: v1.21"),
    check_duplicates: bool = typer.Option(
        False,
        "--check-duplicates/--no-check-duplicates",
        help="Fail when a KEP appears in more than one stage.",
    ),
    repo_path: Optional[Path] = typer.Option(None, "--repo-path", help="Path to the enhancements repo."),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Generate the release manifest."""
    echo_fn = _context_echo(ctx)
    try:
        parse_version(version)
        _settings, root = _resolve(config, repo_path)
        generate_manifest(root, version, check_duplicates=check_duplicates, echo_fn=echo_fn)
    except KepctlError as exc:
        _fail(exc)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
