"""CLI entry point for stepnest."""
from __future__ import annotations

import logging
import sys
from typing import Optional, Tuple

import click
from colorama import init as colorama_init

from stepnest import __version__, bootstrap
from stepnest.config import ReporterConfig, load_config
from stepnest.events import EventDispatcher
from stepnest.plugin import ReportPlugin
from stepnest.replay import load_event_log, replay as replay_events
from stepnest.writers import CompositeWriter, ReportWriter, writer_registry


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"stepnest {__version__}")
    raise click.exceptions.Exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the stepnest version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Turn test lifecycle event logs into nested step reports."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    bootstrap()
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.argument("events_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML reporter config (output_dir).",
)
@click.option("--output-dir", type=click.Path(file_okay=False), help="Directory for report files.")
@click.option(
    "--format",
    "formats",
    multiple=True,
    default=("json",),
    show_default=True,
    help="Report format; repeat to write several (json, terminal).",
)
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.pass_obj
def replay(
    state: CliState,
    events_path: str,
    config_path: Optional[str],
    output_dir: Optional[str],
    formats: Tuple[str, ...],
    no_color: bool,
) -> None:
    """Replay a recorded event log into the selected report formats."""

    colorama_init()
    try:
        config = load_config(config_path) if config_path else ReporterConfig()
        config = config.with_output_dir(output_dir)
        writer = _build_writer(formats, config, use_color=not no_color)
        records = load_event_log(events_path)
        dispatcher = EventDispatcher()
        plugin = ReportPlugin(config, writer=writer).register(dispatcher)
        summary = replay_events(records, dispatcher, plugin)
    except Exception as exc:  # pragma: no cover - CLI error translation
        raise click.ClickException(str(exc)) from exc
    if state.verbose:
        click.echo(
            f"Replayed {len(records)} event(s): passed={summary.passed} "
            f"failed={summary.failed} pending={summary.pending}",
            err=True,
        )
    raise click.exceptions.Exit(0 if summary.failed == 0 else 1)


@cli.command("formats")
def list_formats() -> None:
    """List the registered report formats."""

    for name in writer_registry.names():
        click.echo(name)


def _build_writer(formats: Tuple[str, ...], config: ReporterConfig, *, use_color: bool) -> ReportWriter:
    writers = [
        writer_registry.create(name, output_dir=config.output_dir, use_color=use_color)
        for name in dict.fromkeys(formats)
    ]
    if len(writers) == 1:
        return writers[0]
    return CompositeWriter(writers)


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="stepnest", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
