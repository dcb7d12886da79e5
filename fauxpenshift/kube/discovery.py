import logging
import os
import tempfile
import threading
import uuid

import urllib3
from kubernetes.client import ApiException
from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.discovery import LazyDiscoverer
from kubernetes.dynamic.exceptions import ResourceNotFoundError, ResourceNotUniqueError

from fauxpenshift.errors import ResolutionError

logger = logging.getLogger("fauxpenshift.kube.discovery")


class MemoryDiscoverer(LazyDiscoverer):
    """LazyDiscoverer whose cache lives only in memory.

    The stock discoverer persists to a file shared by every client talking to
    the same host. Pointing it at a path that never exists and never writing
    it keeps each instance's cache private.
    """

    def __init__(self, client, cache_file=None):
        cache_file = cache_file or os.path.join(
            tempfile.gettempdir(), f"fauxpenshift-{uuid.uuid4().hex}.json")
        super().__init__(client, cache_file)

    def _write_cache(self):
        pass


class Discovery:
    """Resolves (apiVersion, kind) into a dynamic resource handle.

    The dynamic client, and with it the discovery cache, is created on first
    use and kept for the lifetime of this object. Share one instance between
    callers to share the cache; lookups after the first are served from
    memory, and a miss makes the discoverer re-read the server once.
    """

    def __init__(self, api_client, dynamic_client=None):
        self.api_client = api_client
        self._dynamic = dynamic_client
        self._lock = threading.RLock()

    @property
    def dynamic(self):
        with self._lock:
            if self._dynamic is None:
                logger.debug("Starting API discovery")
                self._dynamic = DynamicClient(self.api_client, discoverer=MemoryDiscoverer)
            return self._dynamic

    def rest_mapping(self, api_version: str, kind: str):
        try:
            # the lazy discoverer fills its cache while searching
            with self._lock:
                return self.dynamic.resources.get(api_version=api_version, kind=kind)
        except (ResourceNotFoundError, ResourceNotUniqueError) as e:
            raise ResolutionError(api_version, kind) from e
        except ApiException as e:
            raise ResolutionError(
                api_version, kind, f"discovery failed: ({e.status}) {e.reason}"
            ) from e
        except (urllib3.exceptions.HTTPError, ValueError) as e:
            raise ResolutionError(api_version, kind, f"discovery failed: {e}") from e
