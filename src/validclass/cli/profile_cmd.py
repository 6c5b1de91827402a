"""Profile CLI commands: check YAML declarations."""

from pathlib import Path

import click
import yaml

from validclass.exceptions import ValidClassError
from validclass.loader import load_profile


@click.group()
def profile():
    """Profile commands."""
    pass


@profile.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--ignore-unknown",
    is_flag=True,
    default=False,
    help="Report unknown directives, mixins and filters instead of failing.",
)
def check(path: Path, ignore_unknown: bool):
    """Check a YAML profile (file or directory) for declaration errors."""
    try:
        validator = load_profile(path).build(
            ignore_unknown=ignore_unknown,
            report_unknown=ignore_unknown,
        )
    except (ValidClassError, yaml.YAMLError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(f"Resolved {len(validator.fields)} fields, {len(validator.mixins)} mixins:")
    for name, field in validator.fields.items():
        directives = ", ".join(key for key in field.directives if field.directives[key] != [])
        click.echo(f"  ✓ {name} ({directives or 'no directives'})")

    unknown = validator.warnings
    for message in unknown:
        click.echo(click.style(f"  ! {message}", fg="yellow"))

    if unknown:
        click.echo(click.style(f"\n{len(unknown)} unknown declaration(s) ignored.", fg="yellow"))
    else:
        click.echo(click.style("\nProfile is valid.", fg="green", bold=True))
