"""Params CLI commands: validate a parameter file against a profile."""

import json
from pathlib import Path
from typing import Any

import click
import yaml

from validclass.exceptions import ValidClassError
from validclass.loader import load_profile


def _load_params(path: Path) -> dict[str, Any]:
    with path.open() as fh:
        if path.suffix.lower() == ".json":
            data = json.load(fh)
        else:
            data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must contain a mapping of parameters")
    return data


@click.group()
def params():
    """Parameter commands."""
    pass


@params.command("validate")
@click.argument("profile_path", type=click.Path(exists=True, path_type=Path))
@click.argument("params_path", type=click.Path(exists=True, path_type=Path))
@click.argument("fields", nargs=-1)
@click.option(
    "--ignore-unknown",
    is_flag=True,
    default=False,
    help="Skip parameters that match no declared field.",
)
@click.option(
    "--report-unknown",
    is_flag=True,
    default=False,
    help="With --ignore-unknown, report skipped parameters as errors.",
)
def validate_cmd(
    profile_path: Path,
    params_path: Path,
    fields: tuple[str, ...],
    ignore_unknown: bool,
    report_unknown: bool,
):
    """Validate PARAMS_PATH (JSON or YAML) against the profile at PROFILE_PATH.

    FIELDS limits validation to the named fields; prefix a name with + or -
    to force it required or optional (put -- before the first field name).
    """
    try:
        validator = load_profile(profile_path).build(
            params=_load_params(params_path),
            ignore_unknown=ignore_unknown,
            report_unknown=report_unknown,
        )
        valid = validator.validate(*fields)
    except (ValidClassError, yaml.YAMLError, json.JSONDecodeError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if valid:
        click.echo(click.style("Valid", fg="green", bold=True))
        return

    for message in validator.error():
        click.echo(click.style(f"  ✗ {message}", fg="red"))
    click.echo(
        click.style(f"\n{validator.error_count()} error(s) found", fg="red", bold=True)
    )
    raise SystemExit(1)
