"""Diagnostic command-line tool for scansync.

Bench checks for the scanner interface: list devices, watch the input
lines, wait for a trigger and send output pulses. Every command accepts
``--config`` (TOML) and honours SCANSYNC_* environment overrides.

Usage:
    $ scansync devices
    $ scansync watch --tr 2.0 --duration 30
    $ scansync wait --tr 2.0 --channel 0 --timeout 60
    $ scansync send 1 --width 0.01
"""

import math
from pathlib import Path
import time
from typing import List, Optional

import typer

from .adapters import NullKeyboard, detect_devices
from .config import load_settings
from .domain.config import Settings
from .exceptions import ScanSyncError
from .monitor import ChannelMonitor
from .sender import TriggerSender
from .utils import configure_logger

__all__ = ["app"]

app = typer.Typer(help="Scanner trigger and button-box synchronisation tools.", no_args_is_help=True)

ConfigOption = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="TOML configuration file")
LogLevelOption = typer.Option(None, "--log-level", help="Override logging level")


def _setup(config: Optional[Path], log_level: Optional[str]) -> Settings:
    settings = load_settings(config)
    configure_logger("scansync", level=log_level or settings.logging.level, structured=settings.logging.structured)
    return settings


def _resolve_tr(settings: Settings, tr: Optional[float]) -> float:
    if tr is not None:
        return tr
    if settings.input.repetition_interval_s is not None:
        return settings.input.repetition_interval_s
    typer.echo("Repetition interval required: pass --tr or set input.repetition_interval_s", err=True)
    raise typer.Exit(code=2)


def _format_time(value: float) -> str:
    return "-" if math.isnan(value) else f"{value:.4f}"


@app.command()
def devices(config: Optional[Path] = ConfigOption, log_level: Optional[str] = LogLevelOption):
    """List NI-DAQmx devices visible to the driver."""
    _setup(config, log_level)
    names = detect_devices()
    if not names:
        typer.echo("No NI-DAQmx devices detected")
        raise typer.Exit(code=1)
    for name in names:
        typer.echo(name)


@app.command()
def watch(
    tr: Optional[float] = typer.Option(None, "--tr", help="Repetition interval in seconds"),
    duration: float = typer.Option(10.0, "--duration", "-d", min=0.0, help="Seconds to watch"),
    keyboard: bool = typer.Option(True, "--keyboard/--no-keyboard", help="Use the keyboard for emulated buttons"),
    config: Optional[Path] = ConfigOption,
    log_level: Optional[str] = LogLevelOption,
):
    """Print every counted event on every channel for a while."""
    settings = _setup(config, log_level)
    tr = _resolve_tr(settings, tr)

    monitor = ChannelMonitor(settings=settings, keyboard=None if keyboard else NullKeyboard())
    try:
        with monitor.init(tr):
            deadline = monitor.clock.now() + duration
            while True:
                state = monitor.poll()
                for channel in state.fired():
                    pulse = monitor.estimated_pulse_number()
                    typer.echo(f"channel={channel} time={state.current_event_time[channel]:.4f} count={state.event_count[channel]} pulse={pulse}")
                if monitor.clock.now() >= deadline:
                    break
                monitor.clock.sleep(settings.input.poll_interval_s)

            typer.echo(f"event counts: {monitor.state().event_count}")
    except ScanSyncError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)


@app.command()
def wait(
    tr: Optional[float] = typer.Option(None, "--tr", help="Repetition interval in seconds"),
    channel: List[int] = typer.Option([0], "--channel", help="Channel(s) to wait for, 0 = trigger"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", min=0.0, help="Give up after this many seconds (default: wait forever)"),
    release: bool = typer.Option(False, "--release", help="Wait for the channels to be released"),
    keyboard: bool = typer.Option(True, "--keyboard/--no-keyboard", help="Use the keyboard for emulated buttons"),
    config: Optional[Path] = ConfigOption,
    log_level: Optional[str] = LogLevelOption,
):
    """Block until one of the channels fires; exit code 1 on timeout."""
    settings = _setup(config, log_level)
    tr = _resolve_tr(settings, tr)

    monitor = ChannelMonitor(settings=settings, keyboard=None if keyboard else NullKeyboard())
    try:
        with monitor.init(tr):
            deadline = math.inf if timeout is None else monitor.clock.now() + timeout
            result = monitor.wait_for(channel, deadline=deadline, release=release)
    except ScanSyncError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    if release:
        typer.echo(f"released={not any(result.state.previous_level[c] for c in channel)}")
        return

    for ch, t in zip(channel, result.event_times):
        typer.echo(f"channel={ch} time={_format_time(t)}")
    typer.echo(f"pulse={result.pulse_number}")
    if result.timed_out:
        raise typer.Exit(code=1)


@app.command()
def send(
    lines: List[int] = typer.Argument(..., help="1-based output line numbers to raise"),
    width: float = typer.Option(0.01, "--width", "-w", min=0.0, help="Seconds to hold the lines high"),
    config: Optional[Path] = ConfigOption,
    log_level: Optional[str] = LogLevelOption,
):
    """Raise output lines for a short pulse, then lower them."""
    settings = _setup(config, log_level)

    try:
        with TriggerSender(settings=settings).init() as sender:
            levels = sender.send(lines)
            time.sleep(width)
            sender.send([])
    except ScanSyncError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(f"sent {levels.astype(int).tolist()}")


def main():
    app()


if __name__ == "__main__":
    main()
