"""fv-patcher CLI - Command line interface for fv-patcher."""
import logging
import sys
from pathlib import Path

import click

from fv_patcher import __version__
from fv_patcher.core.config import Client, Expansion, PatcherConfig, WritePolicy, settings_root
from fv_patcher.core.errors import ConfigError, FvPatcherError, TransportError
from fv_patcher.manifest import make_fetcher, resolve_manifest
from fv_patcher.reconcile import Reconciler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(name)s: %(message)s",
)
logger = logging.getLogger("fv_patcher")

CLIENT_CHOICES = click.Choice([c.value for c in Client])
EXPANSION_CHOICES = click.Choice([e.value for e in Expansion])


def _build_config(**values) -> PatcherConfig:
    try:
        return PatcherConfig.build(**values)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(7)


@click.group()
@click.version_option(__version__, prog_name="fv-patcher")
def main():
    """fv-patcher - keep a game client in sync with its remote filelist."""
    pass


@main.command()
@click.argument(
    "root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option("--client", required=True, type=CLIENT_CHOICES, help="Game client (rof is the RoF2 client)")
@click.option("--expansion", required=True, type=EXPANSION_CHOICES, help="Expansion to patch for")
@click.option("--verbose", is_flag=True, help="Report files that are already up to date")
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Filelist cache directory (default: per-user config directory)",
)
@click.option("--max-age-days", type=int, default=7, help="Refetch the cached filelist after this many days")
@click.option("--timeout", type=float, default=30.0, help="Per-request timeout in seconds")
@click.option("--verify-tls", is_flag=True, help="Verify TLS certificates when fetching")
@click.option("--force-refresh", is_flag=True, help="Ignore the cached filelist and fetch fresh")
@click.option(
    "--write-verified",
    is_flag=True,
    help="Also write fetched files whose checksum matches (default writes only mismatches)",
)
@click.option("--dry-run", is_flag=True, help="List planned deletes and downloads without applying them")
def patch(
    root: Path,
    client: str,
    expansion: str,
    verbose: bool,
    cache_dir: Path,
    max_age_days: int,
    timeout: float,
    verify_tls: bool,
    force_refresh: bool,
    write_verified: bool,
    dry_run: bool,
):
    """Patch the installation at ROOT against the remote filelist.

    Examples:
        fv-patcher patch ~/games/eq --client rof --expansion kunark
        fv-patcher patch . --client rof --expansion original --dry-run

    Exit codes:
        0: Success (failed deletes and checksum mismatches are only reported)
        1: Filelist could not be resolved, or a file download failed
        2: Invalid CLI usage
        7: Configuration error
    """
    if verbose:
        logging.getLogger("fv_patcher").setLevel(logging.DEBUG)

    config = _build_config(
        root=root,
        client=client,
        expansion=expansion,
        verbose=verbose,
        cache_dir=cache_dir or settings_root(),
        max_age_days=max_age_days,
        timeout=timeout,
        verify_tls=verify_tls,
        force_refresh=force_refresh,
        write_policy=WritePolicy.ALWAYS if write_verified else WritePolicy.MISMATCH_ONLY,
    )

    try:
        with make_fetcher(config) as fetcher:
            document = resolve_manifest(config, fetcher=fetcher)
            click.echo(f"Filelist manifest version {document.version}")

            reconciler = Reconciler(
                root=config.root,
                fetcher=fetcher,
                write_policy=config.write_policy,
                verbose=config.verbose,
            )

            if dry_run:
                pending_deletes = reconciler.plan_deletes(document)
                pending_downloads = reconciler.plan_downloads(document)
                for entry in pending_deletes:
                    click.echo(f"DELETE {entry.name}")
                for entry in pending_downloads:
                    click.echo(f"GET {document.url_for(entry)}")
                click.echo(f"[DRY RUN] {len(pending_deletes)} deletes, {len(pending_downloads)} downloads pending")
                sys.exit(0)

            report = reconciler.run(document)

        click.echo(f"[OK] Patch complete: {config.root}")
        click.echo(f"  Deleted: {report.deletes.succeeded}/{report.deletes.attempted}")
        click.echo(f"  Downloaded: {report.downloads.succeeded}/{report.downloads.attempted}")
        if report.mismatches:
            click.echo(f"  Checksum mismatches: {len(report.mismatches)}")
        if report.errors:
            click.echo(f"  Errors: {len(report.errors)}")
        sys.exit(0)

    except TransportError as e:
        logger.error(f"Download failed: {str(e)}")
        sys.exit(1)

    except FvPatcherError as e:
        logger.error(f"Patch failed: {str(e)}")
        sys.exit(1)


@main.command()
@click.option("--client", required=True, type=CLIENT_CHOICES, help="Game client (rof is the RoF2 client)")
@click.option("--expansion", required=True, type=EXPANSION_CHOICES, help="Expansion to look up")
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Filelist cache directory (default: per-user config directory)",
)
@click.option("--verify-tls", is_flag=True, help="Verify TLS certificates when fetching")
@click.option("--force-refresh", is_flag=True, help="Ignore the cached filelist and fetch fresh")
def manifest(client: str, expansion: str, cache_dir: Path, verify_tls: bool, force_refresh: bool):
    """Resolve the filelist for a client/expansion and summarise it.

    Exit codes:
        0: Success
        1: Filelist could not be resolved
        7: Configuration error
    """
    config = _build_config(
        root=Path.cwd(),
        client=client,
        expansion=expansion,
        cache_dir=cache_dir or settings_root(),
        verify_tls=verify_tls,
        force_refresh=force_refresh,
    )

    try:
        with make_fetcher(config) as fetcher:
            document = resolve_manifest(config, fetcher=fetcher)
    except FvPatcherError as e:
        logger.error(f"Filelist resolution failed: {str(e)}")
        sys.exit(1)

    click.echo(f"[OK] Filelist: {client}.{expansion}")
    click.echo(f"  Version: {document.version}")
    click.echo(f"  Download prefix: {document.download_prefix}")
    click.echo(f"  Deletes: {len(document.deletes)}")
    click.echo(f"  Downloads: {len(document.downloads)}")
    sys.exit(0)


if __name__ == "__main__":
    main()
