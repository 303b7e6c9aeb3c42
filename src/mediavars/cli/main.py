"""Mediavars CLI entry point: Click group with subcommands."""

import logging

import click

from mediavars import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mediavars")
@click.option("-v", "--verbose", is_flag=True, help="Log each processing step.")
def cli(verbose: bool) -> None:
    """Mediavars - resolve var() and calc() in @media params."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register subcommands
from mediavars.cli.process import process  # noqa: E402
from mediavars.cli.inspect import inspect  # noqa: E402

cli.add_command(process)
cli.add_command(inspect)
