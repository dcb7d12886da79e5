import json
import time
from dataclasses import dataclass
from types import SimpleNamespace
from urllib.parse import parse_qsl, urlsplit

import pytest
from kubernetes import client
from kubernetes.client import ApiException
from kubernetes.dynamic.exceptions import ResourceNotFoundError

from fauxpenshift.kube.discovery import Discovery


@dataclass(frozen=True)
class FakeResource:
    group_version: str
    kind: str
    name: str
    namespaced: bool


CATALOGUE = [
    FakeResource("v1", "ConfigMap", "configmaps", True),
    FakeResource("v1", "Namespace", "namespaces", False),
    FakeResource("v1", "Node", "nodes", False),
    FakeResource("apps/v1", "Deployment", "deployments", True),
    FakeResource("rbac.authorization.k8s.io/v1", "ClusterRole", "clusterroles", False),
    FakeResource("rbac.authorization.k8s.io/v1", "Role", "roles", True),
]


class FakeResources:
    def __init__(self, catalogue):
        self.catalogue = list(catalogue)
        self.lookups = []

    def get(self, api_version=None, kind=None):
        self.lookups.append((api_version, kind))
        for res in self.catalogue:
            if res.group_version == api_version and res.kind == kind:
                return res
        raise ResourceNotFoundError(f"No matches found for {{'api_version': {api_version!r}, 'kind': {kind!r}}}")


class FakeDynamicClient:
    """Stands in for kubernetes.dynamic.DynamicClient: a static catalogue and recorded applies."""

    def __init__(self, catalogue=CATALOGUE):
        self.resources = FakeResources(catalogue)
        self.applied = []
        self.error = None

    def server_side_apply(self, resource, body=None, name=None, namespace=None, **kwargs):
        self.applied.append(dict(resource=resource, body=body, name=name, namespace=namespace, **kwargs))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(to_dict=lambda: body)


@pytest.fixture()
def dynamic():
    return FakeDynamicClient()


@pytest.fixture()
def apis(mocker, dynamic):
    api = mocker.Mock()
    return {
        "api": api,
        "core": mocker.Mock(),
        "apps": mocker.Mock(),
        "discovery": Discovery(api, dynamic_client=dynamic),
    }


API_GROUPS = {
    "/version": {"major": "1", "minor": "30", "gitVersion": "v1.30.0"},
    "/api": {"kind": "APIVersions", "versions": ["v1"]},
    "/apis": {
        "kind": "APIGroupList",
        "groups": [{
            "name": "apps",
            "versions": [{"groupVersion": "apps/v1", "version": "v1"}],
            "preferredVersion": {"groupVersion": "apps/v1", "version": "v1"},
        }],
    },
    "/api/v1": {
        "kind": "APIResourceList",
        "groupVersion": "v1",
        "resources": [
            {"name": "namespaces", "singularName": "namespace", "namespaced": False,
             "kind": "Namespace", "verbs": ["get", "list", "patch"]},
            {"name": "namespaces/status", "singularName": "", "namespaced": False,
             "kind": "Namespace", "verbs": ["get", "patch"]},
            {"name": "configmaps", "singularName": "configmap", "namespaced": True,
             "kind": "ConfigMap", "verbs": ["get", "list", "patch"]},
        ],
    },
    "/apis/apps/v1": {
        "kind": "APIResourceList",
        "groupVersion": "apps/v1",
        "resources": [
            {"name": "deployments", "singularName": "deployment", "namespaced": True,
             "kind": "Deployment", "verbs": ["get", "list", "patch"]},
            {"name": "deployments/scale", "singularName": "", "namespaced": True,
             "kind": "Scale", "verbs": ["get", "patch"]},
        ],
    },
}


class FakeHTTPResponse:
    def __init__(self, payload, status=200):
        self.status = status
        self.reason = "OK"
        self.data = json.dumps(payload).encode("utf-8")
        self.headers = {"Content-Type": "application/json"}

    def read(self):
        return self.data

    def getheaders(self):
        return self.headers

    def getheader(self, name, default=None):
        return self.headers.get(name, default)


class FakeApiServer:
    """Answers the requests a real ApiClient hands to its REST transport."""

    def __init__(self):
        self.requests = []

    def __call__(self, *args, **kwargs):
        method = kwargs.get("method", args[0] if args else None)
        url = kwargs.get("url", args[1] if len(args) > 1 else None)
        parts = urlsplit(url)
        query = parse_qsl(parts.query) + [(k, str(v)) for k, v in kwargs.get("query_params") or []]
        body = kwargs.get("body")
        if isinstance(body, (bytes, str)):
            body = json.loads(body)

        self.requests.append(SimpleNamespace(
            method=method.upper(),
            path=parts.path,
            query=query,
            headers=kwargs.get("headers") or {},
            body=body,
        ))

        if method.upper() == "PATCH":
            return FakeHTTPResponse(body)
        if parts.path in API_GROUPS:
            return FakeHTTPResponse(API_GROUPS[parts.path])
        raise ApiException(status=404, reason="Not Found")

    def calls(self, method):
        return [r for r in self.requests if r.method == method]


@pytest.fixture()
def api_server():
    return FakeApiServer()


@pytest.fixture()
def real_api(mocker, api_server):
    configuration = client.Configuration()
    configuration.host = "https://cluster.example:6443"
    api = client.ApiClient(configuration)
    mocker.patch.object(api.rest_client, "request", side_effect=api_server)
    return api


@pytest.fixture()
def timer():
    return Stopwatch()


class Stopwatch:
    """Measures the wall time spent inside a `with` block."""

    def __init__(self):
        self.started = None
        self.stopped = None

    @property
    def seconds(self):
        end = self.stopped if self.stopped is not None else time.perf_counter()
        return end - self.started

    def __enter__(self):
        self.started = time.perf_counter()
        self.stopped = None
        return self

    def __exit__(self, *exc_info):
        self.stopped = time.perf_counter()
