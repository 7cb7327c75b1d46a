"""CLI: faultpack inspect <file>"""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from faultpack.errors import EnvelopeParseError
from faultpack.transport.envelope import parse_envelope

console = Console()

PREVIEW_CHARS = 60


def _preview(payload: str) -> str:
    flat = payload.replace("\n", "\\n")
    return flat if len(flat) <= PREVIEW_CHARS else flat[:PREVIEW_CHARS - 3] + "..."


@click.command("inspect")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json-output", "--json", is_flag=True)
def inspect_cmd(path, json_output):
    """Show the headers and items of an envelope file."""
    try:
        envelope = parse_envelope(path.read_bytes())
    except EnvelopeParseError as e:
        console.print(f"[red]Invalid envelope: {e}[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(json.dumps({
            "headers": dict(envelope.headers),
            "items": [
                {"headers": dict(item.headers), "size": len(item.payload)}
                for item in envelope.items
            ],
        }, indent=2, default=str))
        return

    event_id = envelope.try_get_event_id()
    console.print(f"[bold]Envelope[/bold] event_id={event_id.hex if event_id else '-'}")
    for key, value in envelope.headers.items():
        console.print(f"  [dim]{key}[/dim] = {value}")

    table = Table(title=f"Items ({len(envelope.items)})")
    table.add_column("#", style="bold")
    table.add_column("Type")
    table.add_column("Size")
    table.add_column("Headers")
    table.add_column("Payload")
    for index, item in enumerate(envelope.items):
        table.add_row(
            str(index),
            item.type or "-",
            str(len(item.payload)),
            Text(json.dumps(dict(item.headers), default=str)),
            Text(_preview(str(item.payload))),
        )
    console.print(table)
