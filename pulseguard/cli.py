"""
Command-line interface for pulseguard.
"""

from __future__ import annotations

from pathlib import Path

import click

from pulseguard.client.infrastructure.config_loader import ConfigLoader
from pulseguard.client.infrastructure.license_store import LicenseStore
from pulseguard.client.infrastructure.transport import RemoteCallTransport
from pulseguard.common.exceptions import SecurityError
from pulseguard.common.models import ClientConfig
from pulseguard.keygen import KeyGenerator


@click.group()
def cli() -> None:
    """pulseguard license and liveness client"""


@cli.command()
@click.option(
    "--keys-dir",
    default=None,
    type=click.Path(path_type=Path),
    help="Directory to save keys (default: from PULSEGUARD_KEYS_DIR env)",
)
@click.option(
    "--authority",
    is_flag=True,
    help="Generate an authority key pair instead of a client one",
)
def keygen(keys_dir: Path | None, authority: bool) -> None:  # noqa: FBT001
    """Generate an Ed25519 key pair"""
    generator = KeyGenerator(keys_dir, prefix="authority" if authority else "client")
    private_path, public_path = generator.generate_keys()
    click.echo(f"Keys generated and saved: {private_path}, {public_path}")


@cli.command(name="license")
@click.option(
    "--license-file",
    default=None,
    type=click.Path(path_type=Path),
    help="License file (default: from PULSEGUARD_LICENSE_FILE env)",
)
@click.option("--keys-dir", default=None, type=click.Path(path_type=Path))
@click.option("--authority-url", default=None, help="Authority base URL")
def license_(
    license_file: Path | None, keys_dir: Path | None, authority_url: str | None
) -> None:
    """Load and verify the license, fetching an anonymous one if missing"""
    loader = ConfigLoader(
        ClientConfig(
            license_file_path=license_file,
            keys_dir=keys_dir,
            authority_url=authority_url,
        )
    )
    try:
        signer = loader.build_signer()
        transport = RemoteCallTransport(signer, timeout=loader.request_timeout)
        store = LicenseStore(
            loader.license_file_path,
            transport,
            signer,
            loader.license_url,
            anonymous_email=loader.anonymous_email,
        )
        record = store.load()
    except SecurityError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"License OK: {record.email} ({record.license_key})")


@cli.command()
def status() -> None:
    """Show the resolved configuration"""
    loader = ConfigLoader(ClientConfig())
    click.echo(f"Client version: {loader.client_version}")
    click.echo(f"Startup URL: {loader.startup_url}")
    click.echo(f"Keep-alive URL: {loader.keepalive_url}")
    click.echo(f"Authority key: {loader.authority_public_key_path}")
    click.echo(f"Client key: {loader.client_private_key_path}")
    click.echo(f"License file: {loader.license_file_path}")
    click.echo(f"Pulse interval: {loader.pulse_interval}s")


if __name__ == "__main__":
    cli()
