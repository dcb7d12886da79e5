from typing import Optional


class FauxpenshiftError(Exception):
    pass


def _describe(kind: Optional[str], name: Optional[str], namespace: Optional[str]) -> str:
    target = f"{kind or '?'}/{name or '?'}"
    if namespace:
        target = f"{target} in namespace '{namespace}'"
    return target


class DecodeError(FauxpenshiftError, ValueError):
    pass


class ResolutionError(FauxpenshiftError):
    def __init__(self, api_version: str, kind: str, message: str = "",
                 name: Optional[str] = None, namespace: Optional[str] = None):
        self.api_version = api_version
        self.kind = kind
        self.name = name
        self.namespace = namespace
        message = message or f"no matches for kind '{kind}' in version '{api_version}'"
        if name:
            message = f"{_describe(kind, name, namespace)}: {message}"
        super().__init__(message)


class ScopeMismatchError(FauxpenshiftError):
    def __init__(self, kind: str, name: Optional[str], namespace: Optional[str], message: str):
        self.kind = kind
        self.name = name
        self.namespace = namespace
        super().__init__(f"{_describe(kind, name, namespace)}: {message}")


class RemoteApplyError(FauxpenshiftError):
    def __init__(self, kind: str, name: str, namespace: Optional[str],
                 status: Optional[int], reason: Optional[str], body: Optional[str] = None):
        self.kind = kind
        self.name = name
        self.namespace = namespace
        self.status = status
        self.reason = reason
        self.body = body
        super().__init__(f"apply of {_describe(kind, name, namespace)} failed: ({status}) {reason}")


class TransientAbsence(FauxpenshiftError):
    """Raised by conditions when the watched object does not exist yet."""


class DeadlineExceeded(FauxpenshiftError, TimeoutError):
    pass


class WaitCancelled(FauxpenshiftError):
    pass
