"""CLI entry point for margintax."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from margintax.config.defaults import default_registry
from margintax.config.schema import DataConfig, FilingStatus
from margintax.core.engine import default_calculator
from margintax.io.serialize import dump_tax_result, load_data_config
from margintax.utils.exceptions import MargintaxError

_STATUS_CHOICES = [s.value for s in FilingStatus] + ["S", "MFJ", "MFS", "HH"]


def _data_config(config_path: Path | None) -> DataConfig | None:
    if config_path is None:
        return None
    return load_data_config(config_path.read_text())


config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to JSON data config file. Uses packaged tables if not provided.",
)


@click.group()
@click.version_option(package_name="margintax")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """margintax — progressive income tax calculator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("jurisdiction")
@click.option(
    "--status",
    "filing_status",
    type=click.Choice(_STATUS_CHOICES, case_sensitive=False),
    default="single",
    show_default=True,
    help="Filing status.",
)
@click.option("--income", type=float, required=True, help="Taxable income.")
@click.option("--effective", is_flag=True, help="Also print the effective rate.")
@click.option(
    "--output",
    "output_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to write the result JSON.",
)
@config_option
def due(
    jurisdiction: str,
    filing_status: str,
    income: float,
    effective: bool,
    output_path: Path | None,
    config_path: Path | None,
) -> None:
    """Compute the tax owed to JURISDICTION."""
    try:
        calculator = default_calculator(_data_config(config_path))
        result = calculator.calculate(jurisdiction, filing_status, income)
    except (MargintaxError, ValidationError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"{result.jurisdiction} ({result.filing_status.value}): {result.liability:.2f}")
    if effective:
        if result.effective_rate is None:
            raise click.ClickException("effective rate is undefined for zero income")
        click.echo(f"Effective rate: {result.effective_rate:.2f}%")
    for diagnostic in result.diagnostics:
        click.echo(f"warning: {diagnostic.message}", err=True)

    if output_path is not None:
        output_path.write_text(dump_tax_result(result))
        click.echo(f"Result written to {output_path}")


@cli.command()
@config_option
def jurisdictions(config_path: Path | None) -> None:
    """List known jurisdictions and how each taxes income."""
    try:
        registry = default_registry(_data_config(config_path))
    except (MargintaxError, ValidationError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc
    for code in registry.jurisdictions():
        policy = registry.get_policy(code)
        line = f"{code}: {policy.kind}"
        rate = getattr(policy, "rate", None)
        if rate is not None:
            line += f" ({rate:.2%})"
        click.echo(line)


if __name__ == "__main__":
    cli()
