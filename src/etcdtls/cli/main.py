"""
etcdtls CLI

Commands:
- provision: Create the client, server and peer TLS secrets of a cluster
- inspect: Show the identity encoded in a stored certificate
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.table import Table

from etcdtls import __version__
from etcdtls.config import ClusterDescriptor, ProvisioningConfig
from etcdtls.constants import DEFAULT_ORGANIZATION
from etcdtls.exceptions import EtcdTLSError
from etcdtls.provisioning import ProvisioningOrchestrator
from etcdtls.storage import DirectorySecretStore, MemorySecretStore, SecretStore
from etcdtls.tls import ExternalTrustRoot, TrustRootProvider
from etcdtls.tls.certs import alt_names_of, common_name_of, organization_of
from etcdtls.tls.pem import decode_certificate_pem

console = Console()
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(__version__, prog_name="etcdtls")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def app(verbose: bool) -> None:
    """etcdtls - TLS bootstrap for Vault's etcd cluster."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
@click.argument("name")
@click.option("--namespace", "-n", required=True, help="Namespace of the cluster")
@click.option("--cluster-domain", default=None, help="Cluster DNS domain")
@click.option(
    "--organization", "-o", multiple=True, help="Certificate organization (repeatable)"
)
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write secrets under this directory instead of keeping them in memory",
)
@click.option("--ca-key", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--ca-cert", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def provision(
    name: str,
    namespace: str,
    cluster_domain: Optional[str],
    organization: tuple[str, ...],
    output: Optional[Path],
    ca_key: Optional[Path],
    ca_cert: Optional[Path],
) -> None:
    """Create the etcd TLS secrets for cluster NAME."""
    if (ca_key is None) != (ca_cert is None):
        raise click.UsageError("--ca-key and --ca-cert must be given together")

    config = ProvisioningConfig(organization=list(organization or DEFAULT_ORGANIZATION))
    store: SecretStore = DirectorySecretStore(output) if output else MemorySecretStore()
    trust_root: Optional[TrustRootProvider] = None
    if ca_key and ca_cert:
        trust_root = ExternalTrustRoot(ca_key.read_bytes(), ca_cert.read_bytes())

    orchestrator = ProvisioningOrchestrator(store, config=config, trust_root=trust_root)
    cluster = ClusterDescriptor(name=name, namespace=namespace, cluster_domain=cluster_domain)
    try:
        result = orchestrator.provision(cluster)
    except EtcdTLSError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)

    table = Table(title=f"TLS secrets for {namespace}/{name}", box=box.ROUNDED)
    table.add_column("Secret", style="cyan", no_wrap=True)
    table.add_column("Fields")
    for secret_name in result.secrets:
        record = store.get_record(secret_name)
        fields = ", ".join(sorted(record.data)) if record else ""
        table.add_row(secret_name, fields)
    console.print(table)
    if output:
        console.print(f"[green]✓[/green] Wrote {len(result.secrets)} secrets to {output}")


@app.command()
@click.argument("secret_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("field")
def inspect(secret_dir: Path, field: str) -> None:
    """Show the certificate stored in FIELD of SECRET_DIR."""
    store = DirectorySecretStore(secret_dir.parent)
    try:
        record = store.get_record(secret_dir.name)
    except EtcdTLSError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)
    if record is None or field not in record.data:
        console.print(f"[red]Error:[/red] no field {field!r} in {secret_dir}")
        raise SystemExit(1)
    try:
        cert = decode_certificate_pem(record.data[field])
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {field} is not a certificate: {exc}")
        raise SystemExit(1)

    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Attribute", style="bold", no_wrap=True)
    table.add_column("Value")
    table.add_row("Common Name", common_name_of(cert))
    table.add_row("Organization", ", ".join(organization_of(cert)))
    table.add_row("SANs", ", ".join(sorted(alt_names_of(cert))) or "-")
    table.add_row("Issuer", cert.issuer.rfc4514_string())
    table.add_row("Not before", cert.not_valid_before_utc.isoformat())
    table.add_row("Not after", cert.not_valid_after_utc.isoformat())
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
