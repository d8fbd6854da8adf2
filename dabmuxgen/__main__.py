"""Click-based command line entry point for dabmuxgen."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Sequence

import click

from . import __version__
from .decoder import decode
from .description import DescriptionError, MultiplexDescription, dump_description, load_description
from .encoder import encode, variant_for_path
from .grammar import ConfigSyntaxError
from .logging_conf import configure_logging
from .codes import programme_type_name
from .models import DecodedConfig, OutputVariant, Service
from .validate import (
    MultiplexReport,
    ValidationError,
    assert_capacity,
    assert_compliant,
    assert_no_duplicate_sids,
    assert_required_fields,
    build_report,
)

log = logging.getLogger(__name__)

DESCRIPTION_SUFFIXES = {".yaml", ".yml"}
VARIANT_CHOICE = click.Choice([variant.value for variant in OutputVariant])


@click.group(help="ODR-DabMux configuration generator and capacity calculator")
@click.version_option(__version__)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """
    Root CLI group configuring logging before subcommands execute.
    """

    configure_logging("DEBUG" if verbose else "INFO")
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command("encode")
@click.option("--input", "inp", required=True, type=click.Path(path_type=Path, exists=True, dir_okay=False))
@click.option("--output", "out", default=None, type=click.Path(path_type=Path, dir_okay=False))
@click.option("--variant", default=None, type=VARIANT_CHOICE, help="Override the variant named in the description.")
@click.option("--strict", is_flag=True, default=False, help="Fail on duplicate service ids or ETSI violations.")
def cli_encode(inp: Path, out: Optional[Path], variant: Optional[str], strict: bool) -> None:
    """Generate a multiplexer configuration from a YAML description."""

    try:
        description = load_description(inp)
        report = build_report(description.services, ensemble=description.ensemble)
        _check_report(report, strict)
    except (DescriptionError, ValidationError) as exc:
        raise click.ClickException(str(exc)) from exc

    chosen = OutputVariant(variant) if variant else description.variant
    text = encode(description.ensemble, description.services, description.settings, chosen)
    _emit(text, out)
    log.info("encoded %d services (%d CU) as %s", len(description.services), report.total_cu, chosen.value)


@cli.command("decode")
@click.option("--input", "inp", required=True, type=click.Path(path_type=Path, exists=True, dir_okay=False))
@click.option("--output", "out", default=None, type=click.Path(path_type=Path, dir_okay=False))
def cli_decode(inp: Path, out: Optional[Path]) -> None:
    """Turn a multiplexer configuration into a YAML description."""

    config = _read_config(inp)
    _emit(dump_description(config, variant_for_path(inp)), out)


@cli.command("convert")
@click.option("--input", "inp", required=True, type=click.Path(path_type=Path, exists=True, dir_okay=False))
@click.option("--output", "out", required=True, type=click.Path(path_type=Path, dir_okay=False))
@click.option("--variant", default=None, type=VARIANT_CHOICE, help="Output variant, inferred from --output if omitted.")
def cli_convert(inp: Path, out: Path, variant: Optional[str]) -> None:
    """Re-encode a configuration, e.g. .info to .mux."""

    config = _read_config(inp)
    chosen = OutputVariant(variant) if variant else variant_for_path(out)
    _emit(encode(config.ensemble, config.services, config.settings, chosen), out)
    log.info("converted %s -> %s (%s)", inp, out, chosen.value)


@cli.command("capacity")
@click.option("--input", "inp", required=True, type=click.Path(path_type=Path, exists=True, dir_okay=False))
def cli_capacity(inp: Path) -> None:
    """Print the Capacity Unit usage of a description or configuration."""

    services: Sequence[Service]
    if inp.suffix.lower() in DESCRIPTION_SUFFIXES:
        try:
            description: MultiplexDescription = load_description(inp)
        except DescriptionError as exc:
            raise click.ClickException(str(exc)) from exc
        services, ensemble = description.services, description.ensemble
    else:
        config = _read_config(inp)
        services, ensemble = config.services, config.ensemble

    report = build_report(services, ensemble=ensemble)
    click.echo(f"{'#':>3}  {'SID':<6} {'CU':>4}  {'ETSI':<4}  {'PTY':<20}  LABEL")
    for row, service in zip(report.rows, services):
        flag = "ok" if row.compliant and row.b_bitrate_well_defined else "!!"
        pty = programme_type_name(service.pty)
        click.echo(f"{row.ordinal:>3}  {row.sid:<6} {row.capacity_units:>4}  {flag:<4}  {pty:<20}  {row.label}")
    click.echo(f"total {report.total_cu}/{report.max_cu} CU")
    for warning in report.warnings:
        click.echo(f"warning: {warning}", err=True)
    for missing in report.missing_fields:
        click.echo(f"missing: {missing}", err=True)


def _check_report(report: MultiplexReport, strict: bool) -> None:
    assert_required_fields(report)
    assert_capacity(report)
    if strict:
        assert_no_duplicate_sids(report)
        assert_compliant(report)
        return
    for warning in report.warnings:
        log.warning(warning)


def _read_config(path: Path) -> DecodedConfig:
    try:
        return decode(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise click.ClickException(f"{path}: not a UTF-8 text file ({exc.reason})") from exc
    except ConfigSyntaxError as exc:
        raise click.ClickException(f"{path}: {exc}") from exc


def _emit(text: str, out: Optional[Path]) -> None:
    if out is None:
        click.echo(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")


def main(argv: Optional[Iterable[str]] = None) -> int:
    """
    Entry point returning an exit code, used by the console script.
    """

    argv_list = list(argv or sys.argv[1:])
    try:
        cli.main(args=argv_list, prog_name="dabmuxgen", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return 1
    except SystemExit as exc:
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
