"""
Main CLI entry point for layerkv.

Provides the command-line interface using Click. Without a subcommand it
runs the interactive statement loop on stdin.
"""

import json as _json
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic

import layerkv
import layerkv.config as config
import layerkv.config.sources as config_sources
import layerkv.engine as engine
import layerkv.interpreter as interpreter
import layerkv.logging as kv_logging

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _load_settings(
    commit_policy: str | None,
    log_level: str | None,
) -> config.Settings:
    """Build Settings, applying CLI overrides on top of every other source."""
    overrides: dict[str, _typing.Any] = {}
    if commit_policy:
        overrides["engine"] = {"commit_policy": commit_policy}
    if log_level:
        overrides["logging"] = {"level": log_level}
    try:
        return config.Settings(**overrides)
    except config.ConfigFileError as e:
        raise _click.ClickException(str(e)) from e
    except _pydantic.ValidationError as e:
        raise _click.ClickException(f"Invalid configuration:\n{e}") from e


def _open_transcript(
    settings: config.Settings,
    transcript_path: str | None,
) -> kv_logging.SessionLogger | None:
    """Open a transcript if requested on the command line or in config."""
    if not transcript_path and not settings.logging.transcript:
        return None
    return kv_logging.SessionLogger(
        log_dir=settings.logging.dir,
        log_file=transcript_path or settings.logging.file,
        commit_policy=settings.commit_policy,
    )


def _run_loop(
    ctx: _click.Context,
    stream: _typing.TextIO,
    *,
    prompt: str | None,
    strict: bool = False,
) -> int:
    """
    Read statements from stream until EOF or END, printing each result.

    Returns:
        Exit status: 0, or 1 when strict and a statement failed.
    """
    settings: config.Settings = ctx.obj["settings"]
    store = engine.Store(commit_policy=settings.commit_policy)
    transcript = _open_transcript(settings, ctx.obj.get("transcript"))
    interp = interpreter.Interpreter(
        store,
        null_literal=settings.repl.null_literal,
        transcript=transcript,
    )

    try:
        while True:
            if prompt:
                _click.echo(prompt, nl=False)
            line = stream.readline()
            if not line:
                break

            result = interp.execute(line)
            for text in result.lines():
                _click.echo(text)

            if strict and not result.ok and not result.skipped:
                return 1
            if result.ended and settings.repl.exit_on_end:
                break
    finally:
        if transcript is not None:
            transcript.close()
    return 0


@_click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@_click.version_option(layerkv.__version__, "-v", "--version", prog_name="layerkv")
@_click.option(
    "--commit-policy",
    type=_click.Choice(list(engine.COMMIT_POLICIES)),
    default=None,
    help="How COMMIT folds nested transactions (default from config: root)",
)
@_click.option(
    "--log-level",
    type=_click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Diagnostic log level (logs go to stderr)",
)
@_click.option(
    "--transcript",
    "transcript_path",
    type=_click.Path(dir_okay=False),
    default=None,
    help="Write a JSONL transcript of executed statements to this file",
)
@_click.pass_context
def cli(
    ctx: _click.Context,
    commit_policy: str | None,
    log_level: str | None,
    transcript_path: str | None,
) -> None:
    """layerkv - in-memory key-value store with nested transactions.

    Statements: SET key value, GET key, DELETE key, COUNT value,
    BEGIN, ROLLBACK, COMMIT, END.

    Run without a command to start the interactive loop.
    """
    ctx.ensure_object(dict)
    settings = _load_settings(commit_policy, log_level)
    ctx.obj["settings"] = settings
    ctx.obj["transcript"] = transcript_path
    kv_logging.configure_logging(settings.log_level)

    if ctx.invoked_subcommand is None:
        ctx.invoke(repl)


@cli.command()
@_click.option(
    "--prompt/--no-prompt",
    "show_prompt",
    default=None,
    help="Show the prompt (default: only when stdin is a terminal)",
)
@_click.pass_context
def repl(ctx: _click.Context, show_prompt: bool | None) -> None:
    """Run statements interactively from stdin."""
    settings: config.Settings = ctx.obj["settings"]
    stream = _sys.stdin
    if show_prompt is None:
        show_prompt = stream.isatty()
    ctx.exit(_run_loop(ctx, stream, prompt=settings.prompt if show_prompt else None))


@cli.command()
@_click.argument("script", type=_click.File("r", encoding="utf-8"))
@_click.option("--strict", is_flag=True, help="Stop with exit status 1 at the first failing statement")
@_click.pass_context
def run(ctx: _click.Context, script: _typing.TextIO, strict: bool) -> None:
    """Run every statement in SCRIPT ('-' for stdin)."""
    ctx.exit(_run_loop(ctx, script, prompt=None, strict=strict))


# =============================================================================
# Config Commands
# =============================================================================


@cli.group(invoke_without_command=True)
@_click.pass_context
def config_cmd(ctx: _click.Context) -> None:
    """Configuration commands.

    Without a subcommand, shows a configuration overview.
    """
    if ctx.invoked_subcommand is None:
        settings: config.Settings = ctx.obj["settings"]
        _click.echo("layerkv Configuration:")
        _click.echo(f"  Commit Policy: {settings.commit_policy}")
        _click.echo(f"  Prompt: {settings.prompt!r}")
        _click.echo(f"  Exit On END: {settings.repl.exit_on_end}")
        _click.echo(f"  Log Level: {settings.log_level}")
        _click.echo(f"  Config Dir: {settings.config_dir}")
        unknown = settings.get_unknown_fields()
        if unknown:
            _click.echo("  Unknown keys: " + ", ".join(sorted(unknown)))
        _click.echo("\nRun 'layerkv config show' for full configuration details.")


# Register config_cmd with the name "config" to avoid shadowing the module
cli.add_command(config_cmd, name="config")


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option("--section", type=str, default=None, help="Show specific section only")
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable syntax highlighting (default: auto-detect TTY)",
)
@_click.pass_context
def config_show(
    ctx: _click.Context,
    as_json: bool,
    section: str | None,
    use_color: bool | None,
) -> None:
    """Show effective configuration from all sources.

    Examples:
        layerkv config show                  # YAML (colorized on a terminal)
        layerkv config show --json           # JSON
        layerkv config show --section engine # One section only
    """
    import yaml as _yaml

    settings: config.Settings = ctx.obj["settings"]
    full_config = settings.model_dump(mode="json")

    if section:
        if section not in full_config:
            raise _click.ClickException(f"Unknown section: {section}")
        full_config = {section: full_config[section]}

    if as_json:
        _click.echo(_json.dumps(full_config, indent=2))
        return

    yaml_text = _yaml.dump(full_config, default_flow_style=False, sort_keys=False)
    color = use_color if use_color is not None else _sys.stdout.isatty()
    _print_yaml(yaml_text, color=color, force_color=bool(use_color))


def _print_yaml(yaml_text: str, *, color: bool, force_color: bool = False) -> None:
    """Print YAML text, with rich syntax highlighting when color is on."""
    if not color:
        _click.echo(yaml_text)
        return

    import rich.console as _rich_console
    import rich.syntax as _rich_syntax

    console = _rich_console.Console(
        force_terminal=force_color,
        no_color=False if force_color else None,
        color_system="truecolor" if force_color else "auto",
    )
    console.print(
        _rich_syntax.Syntax(yaml_text, "yaml", theme="monokai", background_color="default")
    )


@config_cmd.command(name="path")
@_click.option("--all", "show_all", is_flag=True, help="Show all paths even if not found")
def config_path(show_all: bool) -> None:
    """Show configuration file locations, highest precedence first."""
    import pathlib as _pathlib

    source = config_sources.LayeredYamlSettingsSource(config.Settings, _pathlib.Path.cwd())
    for name, path, exists in source.get_layer_paths():
        if exists or show_all:
            status = "✓" if exists else "✗"
            _click.echo(f"{status} {name}: {path}")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="layerkv")


if __name__ == "__main__":
    main()
