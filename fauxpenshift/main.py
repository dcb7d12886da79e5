import logging
import signal
import threading

from kubernetes.client import ApiException
from kubernetes.config import ConfigException
from requests import RequestException
from urllib3.exceptions import HTTPError

from fauxpenshift.documents import read_manifest, split_yaml
from fauxpenshift.errors import FauxpenshiftError
from fauxpenshift.kube import apply_manifest_docs, get_k8s_api_clients, label_workers, wait_for_deployment

logger = logging.getLogger("fauxpenshift.cli")


def cmd_apply(apis, args) -> None:
    for source in args.sources:
        docs = split_yaml(read_manifest(source))
        count = apply_manifest_docs(apis, docs, force_conflicts=args.force_conflicts)
        logger.info("Applied %d documents from %s", count, source)


def cmd_wait(apis, args) -> None:
    stop = threading.Event()
    previous = {
        signum: signal.signal(signum, lambda *_: stop.set())
        for signum in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        wait_for_deployment(apis, args.namespace, args.deployment,
                            timeout=args.timeout, interval=args.interval, stop=stop)
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


def cmd_label_workers(apis, args) -> None:
    nodes = label_workers(apis)
    logger.info("Labelled %d worker nodes", len(nodes))


_COMMANDS = {
    "apply": cmd_apply,
    "wait": cmd_wait,
    "label-workers": cmd_label_workers,
}


def run(args) -> int:
    try:
        apis = get_k8s_api_clients(args.kubeconfig)
        _COMMANDS[args.command](apis, args)
    except (FauxpenshiftError, ApiException, ConfigException, HTTPError, RequestException, OSError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    return 0
