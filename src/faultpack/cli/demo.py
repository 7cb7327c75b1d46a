"""CLI: faultpack demo"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from faultpack.client import Client
from faultpack.options import CaptureOptions

console = Console()


def _divide(numerator: int, denominator: int) -> float:
    return numerator / denominator


def _checkout(items: int) -> float:
    return _divide(100, items)


@click.command("demo")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("-m", "--message", default=None, help="Capture a message instead of an exception.")
@click.option("--attach-stacktrace", is_flag=True, help="Attach the current stack to message events.")
def demo_cmd(output: Optional[Path], message: Optional[str], attach_stacktrace: bool):
    """Capture a sample error and write its envelope to a file or stdout."""
    client = Client(CaptureOptions(
        attach_stacktrace=attach_stacktrace,
        in_app_exclude=("click", "rich"),
    ))

    if message is not None:
        envelope = client.capture_message(message)
    else:
        try:
            _checkout(0)
        except ZeroDivisionError as e:
            envelope = client.capture_exception(e)

    if output is None:
        sys.stdout.flush()
        client.write(envelope, sys.stdout.buffer)
        sys.stdout.buffer.flush()
        return

    with output.open("wb") as f:
        client.write(envelope, f)
    console.print(f"[green]Envelope written to {output}[/green]")
