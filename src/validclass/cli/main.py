"""validclass CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """validclass: declarative parameter validation CLI."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


# Register subcommand groups
from validclass.cli.params_cmd import params  # noqa: E402
from validclass.cli.profile_cmd import profile  # noqa: E402

cli.add_command(profile)
cli.add_command(params)
