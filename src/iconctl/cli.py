from __future__ import annotations

import json
import logging
from typing import Optional

import click
from tabulate import tabulate

from iconlib.config import Config, ConfigError, load_config
import iconlib.catalog as catalog
from iconlib.errors import format_error_message, format_config_error, suggest_troubleshooting_steps


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--json-output",
    "json_output",
    is_flag=True,
    help="Output JSON instead of tables (pretty-printed)",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose logging to stderr (what the CLI is doing)",
)
@click.pass_context
def cli(ctx: click.Context, json_output: bool, verbose: bool) -> None:
    """Icon set inspector.

    Finds .appiconset directories, detects their Contents.json format and lists
    the icon files a badging step should process. Configuration is loaded via
    XDG or the ICONCTL_CONFIG environment variable and is optional.
    """
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output
    ctx.obj["verbose"] = verbose

    # Configure logging once per process
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _load_config_or_exit(log: logging.Logger) -> Config:
    try:
        log.info("Loading config...")
        cfg = load_config()
        log.info("Loaded config from %s", cfg.source_path or "<defaults>")
    except ConfigError as e:
        click.echo(format_config_error(e), err=True)
        raise SystemExit(2)
    return cfg


def _fail(ctx: click.Context, operation: str, error: Exception, path: str) -> None:
    error_msg = format_error_message(operation, error, {"path": path})
    click.echo(error_msg, err=True)
    if ctx.obj.get("verbose"):
        suggestions = suggest_troubleshooting_steps(operation, error)
        if suggestions:
            click.echo("\nTroubleshooting suggestions:", err=True)
            for suggestion in suggestions[:3]:  # Show top 3 suggestions
                click.echo(f"  • {suggestion}", err=True)
    raise SystemExit(2)


@cli.command("inspect")
@click.argument("path", type=click.Path(file_okay=False))
@click.pass_context
def inspect_cmd(ctx: click.Context, path: str) -> None:
    """Detect the format of one icon set and list its badgeable icons."""
    log = logging.getLogger("iconctl.inspect")
    try:
        log.info("Inspecting icon set '%s'", path)
        inspector = catalog.IconSetInspector(path)
        files = inspector.badgeable_icons()
        log.info("Found %d badgeable icon(s)", len(files))
    except OSError as e:  # surface helpful error without stack
        _fail(ctx, "inspect icon set", e, path)

    if ctx.obj.get("json"):
        out = {
            "path": str(inspector.directory_path),
            "manifest": str(inspector.manifest_path),
            "format": inspector.schema_kind.value,
            "files": files,
        }
        click.echo(json.dumps(out, indent=2, sort_keys=True))
        return

    rows = [
        ["path", str(inspector.directory_path)],
        ["manifest", str(inspector.manifest_path)],
        ["format", inspector.schema_kind.value],
        ["files", len(files)],
    ]
    click.echo(tabulate(rows, headers=["FIELD", "VALUE"]))
    if files:
        click.echo("")
        click.echo(tabulate([[f] for f in files], headers=["FILE"]))


@cli.command("discover")
@click.option("--path", "search_path", help="Root to search; uses config search_path if omitted")
@click.option("--glob", "glob_pattern", help="Custom glob pattern; skips icon set detection")
@click.pass_context
def discover_cmd(ctx: click.Context, search_path: Optional[str], glob_pattern: Optional[str]) -> None:
    """Find all icon sets below a root directory."""
    log = logging.getLogger("iconctl.discover")
    cfg = _load_config_or_exit(log)

    root = search_path or cfg.search_path
    pattern = glob_pattern if glob_pattern is not None else cfg.glob
    try:
        log.info("Searching for icon sets below '%s'", root)
        result = catalog.find_icon_sets(root, pattern)
    except OSError as e:
        _fail(ctx, "discover icon sets", e, root)

    if isinstance(result, catalog.ResolvedGlob):
        if ctx.obj.get("json"):
            click.echo(json.dumps({"glob": result.pattern}, indent=2, sort_keys=True))
        else:
            click.echo(f"Using custom glob pattern: {result.pattern}")
        return

    if ctx.obj.get("json"):
        out = {
            "icon_sets": [
                {
                    "name": inspector.name,
                    "path": str(inspector.directory_path),
                    "format": inspector.schema_kind.value,
                    "files": inspector.badgeable_icons(),
                }
                for inspector in result
            ]
        }
        click.echo(json.dumps(out, indent=2, sort_keys=True))
        return

    if not len(result):
        click.echo("No icon sets found")
        return

    rows = []
    for inspector in result:
        rows.append(
            [
                inspector.name,
                inspector.schema_kind.value,
                len(inspector.badgeable_icons()),
                str(inspector.directory_path),
            ]
        )
    log.info("Rendering %d icon sets", len(rows))
    click.echo(tabulate(rows, headers=["NAME", "FORMAT", "FILES", "PATH"]))


@cli.command("files")
@click.option("--path", "search_path", help="Root to search; uses config search_path if omitted")
@click.option("--glob", "glob_pattern", help="Custom glob pattern, expanded relative to the root")
@click.pass_context
def files_cmd(ctx: click.Context, search_path: Optional[str], glob_pattern: Optional[str]) -> None:
    """List every icon file that should be badged."""
    log = logging.getLogger("iconctl.files")
    cfg = _load_config_or_exit(log)

    root = search_path or cfg.search_path
    pattern = glob_pattern if glob_pattern is not None else cfg.glob
    try:
        result = catalog.find_icon_sets(root, pattern)
        if isinstance(result, catalog.ResolvedGlob):
            files = catalog.expand_glob(result.pattern, root)
        else:
            files = result.badgeable_icons()
        log.info("Found %d badgeable icon(s)", len(files))
    except OSError as e:
        _fail(ctx, "list icon files", e, root)

    if ctx.obj.get("json"):
        click.echo(json.dumps({"files": files}, indent=2, sort_keys=True))
        return

    if not files:
        click.echo("No icon files found")
        return

    for f in files:
        click.echo(f)


@cli.group()
@click.pass_context
def config(ctx: click.Context) -> None:  # noqa: D401
    """Configuration commands."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the resolved configuration."""
    log = logging.getLogger("iconctl.config")
    cfg = _load_config_or_exit(log)

    if ctx.obj.get("json"):
        click.echo(cfg.to_json())
        return

    rows = [
        ["version", cfg.version],
        ["search_path", cfg.search_path],
        ["glob", cfg.glob or "—"],
        ["source", str(cfg.source_path) if cfg.source_path else "—"],
    ]
    click.echo(tabulate(rows, headers=["FIELD", "VALUE"]))


def main() -> None:  # entry point
    cli(standalone_mode=True)


if __name__ == "__main__":  # pragma: no cover
    main()
