"""Click CLI entry point for the Orienty validator."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from orienty import __version__
from orienty.errors import OrientyError
from orienty.inspection import inspect_scene, render_text as render_inspection_text
from orienty.orientation import detect_model_orientation
from orienty.parser import parse_scene
from orienty.report import (
    detection_payload,
    render_detection_text,
    render_text as render_report_text,
    report_payload,
)
from orienty.validator import validate_model
from orienty.warning_policy import WarningPolicy


def _build_warning_policy(
    warn_as_error: str | None, suppress_warning: str | None
) -> WarningPolicy | None:
    """Parse CLI warning options into a WarningPolicy, or None if unset."""
    try:
        return WarningPolicy.from_options(warn_as_error, suppress_warning)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


def _model_name(input_file: Path) -> str:
    """Strip .scene.yaml or .yaml from the file name."""
    name = input_file.name
    for suffix in [".scene.yaml", ".scene.yml", ".yaml", ".yml"]:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


_warn_as_error_option = click.option(
    "--warn-as-error",
    "warn_as_error",
    type=str,
    default=None,
    help="Comma-separated W-codes to treat as errors (e.g. W01,W02).",
)
_suppress_warning_option = click.option(
    "--suppress-warning",
    "suppress_warning",
    type=str,
    default=None,
    help="Comma-separated W-codes to suppress (e.g. W03).",
)


@click.group()
@click.version_option(version=__version__, prog_name="orienty")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def main(verbose: bool = False) -> None:
    """Orienty: validate 3D scene orientation against a +Y up, -Z forward convention."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Report output format.",
)
@click.option(
    "--name",
    "model_name",
    type=str,
    default=None,
    help="Model name for the report. Defaults to the input file name.",
)
@click.option(
    "--fail-on-error",
    is_flag=True,
    default=False,
    help="Exit with code 2 if the model fails validation.",
)
@_warn_as_error_option
@_suppress_warning_option
def validate(
    input_file: Path,
    output_format: str = "text",
    model_name: str | None = None,
    fail_on_error: bool = False,
    warn_as_error: str | None = None,
    suppress_warning: str | None = None,
) -> None:
    """Validate a .scene.yaml model and print the report."""
    warning_policy = _build_warning_policy(warn_as_error, suppress_warning)

    try:
        spec, root = parse_scene(input_file, warning_policy=warning_policy)
    except OrientyError as e:
        raise click.ClickException(str(e))

    name = model_name or spec.name or _model_name(input_file)
    report = validate_model(root, name)

    if output_format == "json":
        click.echo(json.dumps(report_payload(report), indent=2))
    else:
        click.echo(render_report_text(report), nl=False)

    if fail_on_error and not report.overall_passed:
        raise click.exceptions.Exit(2)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Detection output format.",
)
@_warn_as_error_option
@_suppress_warning_option
def detect(
    input_file: Path,
    output_format: str = "text",
    warn_as_error: str | None = None,
    suppress_warning: str | None = None,
) -> None:
    """Detect the up and forward directions of a .scene.yaml model."""
    warning_policy = _build_warning_policy(warn_as_error, suppress_warning)

    try:
        _, root = parse_scene(input_file, warning_policy=warning_policy)
    except OrientyError as e:
        raise click.ClickException(str(e))

    payload = detection_payload(detect_model_orientation(root))
    if output_format == "json":
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(render_detection_text(payload), nl=False)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Inspection output format.",
)
@_warn_as_error_option
@_suppress_warning_option
def inspect(
    input_file: Path,
    output_format: str = "text",
    warn_as_error: str | None = None,
    suppress_warning: str | None = None,
) -> None:
    """Print model statistics and display normalization."""
    warning_policy = _build_warning_policy(warn_as_error, suppress_warning)

    try:
        _, root = parse_scene(input_file, warning_policy=warning_policy)
    except OrientyError as e:
        raise click.ClickException(str(e))

    payload = inspect_scene(root)
    if output_format == "json":
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(render_inspection_text(payload), nl=False)
