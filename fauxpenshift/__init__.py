from .documents import ResourceDocument, decode_document, download_file_string, split_yaml
from .errors import (
    DeadlineExceeded,
    DecodeError,
    FauxpenshiftError,
    RemoteApplyError,
    ResolutionError,
    ScopeMismatchError,
    TransientAbsence,
    WaitCancelled,
)

__version__ = "0.1.0"

__all__ = [
    "ResourceDocument",
    "decode_document",
    "download_file_string",
    "split_yaml",
    "FauxpenshiftError",
    "DecodeError",
    "ResolutionError",
    "ScopeMismatchError",
    "RemoteApplyError",
    "TransientAbsence",
    "DeadlineExceeded",
    "WaitCancelled",
]
