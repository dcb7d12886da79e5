from .client import get_k8s_api_clients
from .discovery import Discovery, MemoryDiscoverer
from .resources import (
    FIELD_MANAGER,
    Applier,
    apply_document,
    apply_manifest_docs,
    label_workers,
)
from .wait import DeploymentReady, wait_for_deployment, wait_until

__all__ = [
    "get_k8s_api_clients",
    "Discovery",
    "MemoryDiscoverer",
    "FIELD_MANAGER",
    "Applier",
    "apply_document",
    "apply_manifest_docs",
    "label_workers",
    "DeploymentReady",
    "wait_for_deployment",
    "wait_until",
]
