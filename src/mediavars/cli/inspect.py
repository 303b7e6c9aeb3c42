"""CLI command: mediavars inspect -- show what the first step externalizes."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from mediavars.carrier import is_carrier_rule, is_state_carrier
from mediavars.config import MediaVariablesConfig
from mediavars.model.tree import AtRule, Declaration
from mediavars.parser import ParseError
from mediavars.pipeline import Pipeline
from mediavars.plugin import MediaVariables


@click.command()
@click.argument("cssfile", type=click.Path(exists=True, dir_okay=False))
@click.option("--strict", is_flag=True, help="Ignore calc(/var( glued to an identifier.")
def inspect(cssfile: str, strict: bool) -> None:
    """Run only the externalization step and list the placeholders it creates.

    Shows, for every wrapped at-rule, its rewritten params and each
    placeholder with the expression it stands for.
    """
    css_path = Path(cssfile)

    try:
        source = css_path.read_text(encoding="utf-8")
        plugin = MediaVariables(MediaVariablesConfig(strict_functions=strict))
        result = Pipeline([plugin]).process(source, source_path=str(css_path))
    except ParseError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    carriers = [
        rule for rule in result.root.walk_rules()
        if is_carrier_rule(rule) and not is_state_carrier(rule)
    ]
    click.echo(f"Carriers: {len(carriers)}")
    for carrier in carriers:
        for child in carrier.nodes:
            if isinstance(child, AtRule):
                line = child.source.start.line if child.source and child.source.start else "?"
                click.echo(f"  @{child.name} {child.params}  (line {line})")
        for child in carrier.nodes:
            if isinstance(child, Declaration):
                click.echo(f"    {child.prop} = {child.value}")

    for diag in result.warnings():
        click.echo(str(diag), err=True)
