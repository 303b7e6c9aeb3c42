"""CLI command: mediavars process -- run the full pipeline on a CSS file."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from mediavars.config import MediaVariablesConfig
from mediavars.parser import ParseError
from mediavars.pipeline import Pipeline, default_plugins


@click.command()
@click.argument("cssfile", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write CSS here instead of stdout.")
@click.option("--strict", is_flag=True, help="Ignore calc(/var( glued to an identifier.")
@click.option("--preserve", is_flag=True, help="Keep :root custom properties.")
@click.option("--precision", type=int, default=5, show_default=True, help="Decimal places kept by calc().")
def process(cssfile: str, output: str | None, strict: bool, preserve: bool, precision: int) -> None:
    """Resolve var() and calc() in the @media rules of a CSS file.

    Prints warnings to stderr.  Exits with code 1 if the file cannot be
    parsed, 0 otherwise.
    """
    css_path = Path(cssfile)
    config = MediaVariablesConfig(
        strict_functions=strict,
        preserve_variables=preserve,
        precision=precision,
    )

    try:
        source = css_path.read_text(encoding="utf-8")
        result = Pipeline(default_plugins(config)).process(source, source_path=str(css_path))
    except ParseError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    for diag in result.warnings():
        click.echo(f"{css_path.name}: {diag}", err=True)

    if output:
        Path(output).write_text(result.css, encoding="utf-8")
        click.echo(f"Wrote {output} ({len(result.warnings())} warning(s))", err=True)
    else:
        click.echo(result.css, nl=False)
