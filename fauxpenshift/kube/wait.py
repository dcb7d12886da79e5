import logging
import os
import threading
import time
from typing import Any, Callable, Dict, Optional

from kubernetes.client import ApiException

from fauxpenshift.errors import DeadlineExceeded, TransientAbsence, WaitCancelled

logger = logging.getLogger("fauxpenshift.kube.wait")

POLL_INTERVAL = float(os.getenv("FAUXPENSHIFT_POLL_INTERVAL", "5"))
WAIT_TIMEOUT = float(os.getenv("FAUXPENSHIFT_WAIT_TIMEOUT", "300"))
MIN_REQUEST_TIMEOUT = 1.0

Condition = Callable[[], bool]


def _is_absent(e: Exception) -> bool:
    if isinstance(e, TransientAbsence):
        return True
    return isinstance(e, ApiException) and e.status == 404


def wait_until(
        condition: Condition,
        interval: float,
        timeout: float,
        stop: Optional[threading.Event] = None,
) -> None:
    """Evaluate `condition` now and then every `interval` seconds until it is true.

    A condition that raises TransientAbsence or a 404 ApiException is treated
    as not ready yet. Any other exception ends the wait and is re-raised as-is.
    Raises DeadlineExceeded once `timeout` seconds pass without success, and
    WaitCancelled as soon as `stop` is set.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")

    stop = stop or threading.Event()
    end = time.monotonic() + timeout
    attempts = 0

    while True:
        if stop.is_set():
            raise WaitCancelled(f"wait cancelled after {attempts} attempts")

        attempts += 1
        try:
            if condition():
                return
        except Exception as e:
            if not _is_absent(e):
                raise
            logger.debug("attempt %d: not found yet", attempts)

        remaining = end - time.monotonic()
        if remaining <= 0:
            raise DeadlineExceeded(f"timed out waiting for the condition after {attempts} attempts")
        if stop.wait(min(interval, remaining)):
            raise WaitCancelled(f"wait cancelled after {attempts} attempts")


class DeploymentReady:
    """Ready once the Deployment reports at least one ready replica."""

    def __init__(self, apps, namespace: str, name: str, deadline: Optional[float] = None):
        self.apps = apps
        self.namespace = namespace
        self.name = name
        self.deadline = deadline

    def __call__(self) -> bool:
        kwargs = {}
        if self.deadline is not None:
            # a hung request must not outlive the wait
            kwargs["_request_timeout"] = max(self.deadline - time.monotonic(), MIN_REQUEST_TIMEOUT)
        try:
            dep = self.apps.read_namespaced_deployment(self.name, self.namespace, **kwargs)
        except ApiException as e:
            if e.status == 404:
                return False
            raise

        ready = (dep.status.ready_replicas if dep.status else None) or 0
        if ready == 0:
            logger.debug("deployment %s/%s has no ready replicas yet", self.namespace, self.name)
            return False
        return True


def wait_for_deployment(
        apis: Dict[str, Any],
        namespace: str,
        name: str,
        timeout: float = WAIT_TIMEOUT,
        interval: float = POLL_INTERVAL,
        stop: Optional[threading.Event] = None,
) -> None:
    logger.info("Waiting up to %ss for deployment %s/%s", timeout, namespace, name)
    try:
        condition = DeploymentReady(apis["apps"], namespace, name, deadline=time.monotonic() + timeout)
        wait_until(condition, interval, timeout, stop=stop)
    except DeadlineExceeded as e:
        raise DeadlineExceeded(f"deployment {namespace}/{name} not ready after {timeout}s") from e
    logger.info("Deployment %s/%s is ready", namespace, name)
