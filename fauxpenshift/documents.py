from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

import requests
import yaml

from fauxpenshift.errors import DecodeError

Raw = Union[bytes, str]


@dataclass
class ResourceDocument:
    obj: Dict[str, Any]

    @property
    def api_version(self) -> str:
        return self.obj["apiVersion"]

    @property
    def kind(self) -> str:
        return self.obj["kind"]

    @property
    def group_version_kind(self) -> Tuple[str, str, str]:
        group, _, version = self.api_version.rpartition("/")
        return group, version, self.kind

    @property
    def name(self) -> str:
        return self.obj["metadata"]["name"]

    @property
    def namespace(self) -> Optional[str]:
        return self.obj["metadata"].get("namespace")


def decode_document(raw: Raw) -> ResourceDocument:
    """Parse a single YAML or JSON document into a ResourceDocument.

    Only the identity keys are checked; the rest of the tree is kept as-is.
    """
    try:
        obj = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise DecodeError(f"cannot parse resource document: {e}") from e

    if not isinstance(obj, dict):
        raise DecodeError(f"resource document must be a mapping, got {type(obj).__name__}")

    api_version = obj.get("apiVersion")
    kind = obj.get("kind")
    if not api_version or not isinstance(api_version, str):
        raise DecodeError("Object 'apiVersion' is missing in resource document")
    if not kind or not isinstance(kind, str):
        raise DecodeError("Object 'Kind' is missing in resource document")

    metadata = obj.get("metadata")
    if not isinstance(metadata, dict) or not metadata.get("name"):
        raise DecodeError(f"{kind}: metadata.name is required")

    return ResourceDocument(obj=obj)


def split_yaml(resources: Raw) -> List[bytes]:
    try:
        docs = list(yaml.safe_load_all(resources))
    except yaml.YAMLError as e:
        raise DecodeError(f"cannot split manifest: {e}") from e

    res = []
    for doc in docs:
        # "---" separators with nothing between them
        if doc is None:
            continue
        res.append(yaml.safe_dump(doc, sort_keys=False).encode("utf-8"))
    return res


def download_file_string(url: str, timeout: float = 20) -> str:
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.text


def read_manifest(source: str) -> str:
    if source.startswith("http://") or source.startswith("https://"):
        return download_file_string(source)
    with open(source, "r") as f:
        return f.read()
