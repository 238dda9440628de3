import click

from pricestore.infrastructure.cli.server_commands import ping, serve


@click.group()
def cli() -> None:
    """pricestore: Inventory Price Store"""


# Register subcommands
cli.add_command(ping)
cli.add_command(serve)
