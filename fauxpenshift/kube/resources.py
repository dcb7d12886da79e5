import logging
from typing import Any, Dict, Iterable, List

from kubernetes.client import ApiException

from fauxpenshift.documents import Raw, decode_document
from fauxpenshift.errors import RemoteApplyError, ResolutionError, ScopeMismatchError

logger = logging.getLogger("fauxpenshift.kube")

FIELD_MANAGER = "fauxpenshift"
CONTROL_PLANE_LABEL = "node-role.kubernetes.io/control-plane"
WORKER_LABEL = "node-role.kubernetes.io/worker"


class Applier:
    """Server-side apply of schema-less documents.

    The kind of each document is resolved through the discovery cache, so
    any type the server serves can be applied, custom resources included.
    """

    def __init__(self, discovery, field_manager: str = FIELD_MANAGER):
        self.discovery = discovery
        self.field_manager = field_manager

    def apply(self, raw: Raw, force_conflicts: bool = False, request_timeout=None) -> Dict[str, Any]:
        doc = decode_document(raw)
        try:
            resource = self.discovery.rest_mapping(doc.api_version, doc.kind)
        except ResolutionError as e:
            raise ResolutionError(doc.api_version, doc.kind, str(e),
                                  name=doc.name, namespace=doc.namespace) from e

        if resource.namespaced:
            namespace = doc.namespace
            if not namespace:
                raise ScopeMismatchError(doc.kind, doc.name, namespace,
                                         "namespaced kind requires a namespace")
        else:
            namespace = None

        kwargs = {"field_manager": self.field_manager}
        if force_conflicts:
            kwargs["force_conflicts"] = True
        if request_timeout is not None:
            kwargs["_request_timeout"] = request_timeout

        logger.info("Applying %s %s %s", doc.api_version, doc.kind,
                    f"{namespace}/{doc.name}" if namespace else doc.name)
        try:
            result = self.discovery.dynamic.server_side_apply(
                resource, body=doc.obj, name=doc.name, namespace=namespace, **kwargs)
        except ApiException as e:
            raise RemoteApplyError(doc.kind, doc.name, namespace, e.status, e.reason, e.body) from e
        return result.to_dict()


def apply_document(apis: Dict[str, Any], raw: Raw, force_conflicts: bool = False,
                   request_timeout=None) -> Dict[str, Any]:
    applier = Applier(apis["discovery"])
    return applier.apply(raw, force_conflicts=force_conflicts, request_timeout=request_timeout)


def apply_manifest_docs(apis: Dict[str, Any], docs: Iterable[Raw], force_conflicts: bool = False) -> int:
    applier = Applier(apis["discovery"])
    count = 0
    for doc in docs:
        applier.apply(doc, force_conflicts=force_conflicts)
        count += 1
    return count


def label_workers(apis: Dict[str, Any]) -> List[str]:
    core = apis["core"]
    workers = core.list_node(label_selector=f"!{CONTROL_PLANE_LABEL}").items

    labelled = []
    for node in workers:
        name = node.metadata.name
        body = {"metadata": {"labels": {WORKER_LABEL: ""}}}
        core.patch_node(name, body)
        logger.info("Labelled node %s as worker", name)
        labelled.append(name)
    return labelled
