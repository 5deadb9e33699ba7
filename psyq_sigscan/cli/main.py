"""Command-line interface for the PSY-Q signature scanner.

This module provides the CLI for identifying PSY-Q SDK object modules
linked into a PlayStation executable. The report goes to stdout, logging
to stderr.
"""

from pathlib import Path
from typing import Optional

import click

from ..catalog.github_catalog import GitHubSignatureCatalog, LocalSignatureCatalog
from ..core.config import RANKING_MODES, Settings, settings
from ..core.config_loader import ConfigLoader
from ..core.exceptions import SigScanError
from ..core.logger import get_logger, setup_logging
from ..loader import load_executable
from ..pipeline import SignatureMatcher
from ..report import render_report


def _parse_address(ctx, param, value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        address = int(value, 16)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a hexadecimal address")
    if not 0 <= address <= 0xFFFFFFFF:
        raise click.BadParameter("address must fit in 32 bits")
    return address


def _make_source(config: Settings, catalog_dir: Optional[str]):
    if catalog_dir:
        return LocalSignatureCatalog(Path(catalog_dir))
    return GitHubSignatureCatalog(config)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Log errors only; stdout carries just the report')
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False), help='Run profile (YAML)')
@click.option('--no-cache', is_flag=True, help='Do not read or write the signature cache')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool, config: Optional[str], no_cache: bool):
    """PSY-Q signature scanner.

    Identify PSY-Q SDK library modules statically linked into a PlayStation
    executable and print a segment layout and symbol map.
    """
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
        verbose=verbose,
        quiet=quiet
    )

    active = settings
    if config:
        try:
            active = ConfigLoader(Path(config)).apply(settings)
        except SigScanError as e:
            raise click.ClickException(str(e))
    if no_cache:
        active = active.model_copy(update={"enable_cache": False})

    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['settings'] = active


@cli.command()
@click.argument('executable', type=click.Path(exists=True, dir_okay=False))
@click.option('--base-address', '-b', callback=_parse_address, help='Load address of the code image (hex)')
@click.option('--version', '-V', 'versions', multiple=True, help='SDK version tag to scan (repeatable)')
@click.option('--ranking', type=click.Choice(RANKING_MODES), help='Order of the version estimate list')
@click.option('--legacy-scan-bound', is_flag=True,
              help='Skip matches at the very end of the image, like the legacy Go matcher')
@click.option('--strict-signatures', is_flag=True, help='Fail on malformed signatures')
@click.option('--catalog-dir', type=click.Path(exists=True, file_okay=False),
              help='Read signatures from a local catalog mirror')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the report to a file')
@click.pass_context
def scan(ctx, executable: str, base_address: Optional[int], versions: tuple, ranking: Optional[str],
         legacy_scan_bound: bool, strict_signatures: bool,
         catalog_dir: Optional[str], output: Optional[str]):
    """Scan an executable for PSY-Q library modules.

    Examples:
        scan SLUS_012.34
        scan game.exe --version 440 --version 450 --ranking descending
    """
    logger = get_logger(__name__)
    config: Settings = ctx.obj['settings']

    overrides = {}
    if ranking:
        overrides['version_ranking'] = ranking
    if legacy_scan_bound:
        overrides['legacy_scan_bound'] = True
    if strict_signatures:
        overrides['strict_signatures'] = True
    if overrides:
        config = config.model_copy(update=overrides)

    try:
        blob = load_executable(executable, config.header_size)
        matcher = SignatureMatcher(_make_source(config, catalog_dir), config)
        report = matcher.run(blob, base_address, list(versions) or None)
    except SigScanError as e:
        logger.debug("Scan failed", exc_info=True)
        raise click.ClickException(str(e))
    except OSError as e:
        raise click.ClickException(f"Failed to read {executable}: {e}")

    lines = render_report(report)
    if output:
        Path(output).write_text("\n".join(lines) + "\n", encoding='utf-8')
        logger.info(f"Report written to {output}")
    else:
        for line in lines:
            click.echo(line)


@cli.command()
@click.pass_context
def versions(ctx):
    """List the SDK version tags that are scanned by default."""
    for version in ctx.obj['settings'].sdk_versions:
        click.echo(version)


@cli.command('list-signatures')
@click.argument('version')
@click.option('--catalog-dir', type=click.Path(exists=True, file_okay=False),
              help='Read signatures from a local catalog mirror')
@click.pass_context
def list_signatures(ctx, version: str, catalog_dir: Optional[str]):
    """List the signature files published for one SDK version."""
    source = _make_source(ctx.obj['settings'], catalog_dir)
    try:
        files = source.list_signature_files(version)
    except SigScanError as e:
        raise click.ClickException(str(e))

    for item in files:
        click.echo(f"{item.get('path', item.get('name'))}\t{item.get('size', 0)}")
    click.echo(f"{len(files)} files", err=True)


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == '__main__':
    main()
