"""
Cluster naming conventions.

Maps a cluster name to the etcd member service name, the TLS secret names
and the labels attached to every secret. All functions are pure.
"""


def etcd_name_for_cluster(cluster_name: str) -> str:
    """Name of the etcd cluster (and its member service) backing ``cluster_name``."""
    return f"{cluster_name}-etcd"


def tls_secret_name(cluster_name: str, role: str) -> str:
    return f"{etcd_name_for_cluster(cluster_name)}-{role}-tls"


def etcd_client_tls_secret_name(cluster_name: str) -> str:
    return tls_secret_name(cluster_name, "client")


def etcd_server_tls_secret_name(cluster_name: str) -> str:
    return tls_secret_name(cluster_name, "server")


def etcd_peer_tls_secret_name(cluster_name: str) -> str:
    return tls_secret_name(cluster_name, "peer")


def labels_for_cluster(cluster_name: str) -> dict[str, str]:
    """Labels that select every object belonging to ``cluster_name``."""
    return {"app": "vault", "vault_cluster": cluster_name}
