"""
faultpack CLI: `faultpack` command.

Commands:
  faultpack inspect <file>   Show the headers and items of an envelope file
  faultpack demo             Capture a sample error and write its envelope
"""

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install faultpack[cli]")

console = Console()


@click.group()
@click.version_option("0.1.0")
def main():
    """faultpack CLI: capture stack traces and inspect envelopes."""


# Register subcommands from separate modules
from faultpack.cli.envelopes import inspect_cmd
from faultpack.cli.demo import demo_cmd

main.add_command(inspect_cmd)
main.add_command(demo_cmd)


if __name__ == "__main__":
    main()
