import logging
import os
from typing import Any, Dict, Optional

from kubernetes import client, config

from .discovery import Discovery

logger = logging.getLogger("fauxpenshift.kube")


def _load_configuration(kubeconfig: Optional[str]) -> client.Configuration:
    configuration = client.Configuration()
    kubeconfig = kubeconfig or os.getenv("KUBECONFIG")
    if kubeconfig:
        logger.debug("Loading kubeconfig from %s", kubeconfig)
        config.load_kube_config(config_file=kubeconfig, client_configuration=configuration)
        return configuration
    try:
        config.load_incluster_config(client_configuration=configuration)
        logger.debug("Using in-cluster configuration")
    except config.ConfigException:
        logger.debug("Not in a cluster, loading the default kubeconfig")
        config.load_kube_config(client_configuration=configuration)
    return configuration


def get_k8s_api_clients(kubeconfig: Optional[str] = None) -> Dict[str, Any]:
    """Build one bundle of API clients sharing a connection and a discovery cache.

    Every call returns a fresh bundle; keep the bundle around to keep its
    discovery cache warm.
    """
    api = client.ApiClient(_load_configuration(kubeconfig))
    return {
        "api": api,
        "core": client.CoreV1Api(api),
        "apps": client.AppsV1Api(api),
        "discovery": Discovery(api),
    }
