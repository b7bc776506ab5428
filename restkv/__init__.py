"""restkv: async client for a key/value, events and graph HTTP API."""

from restkv.client import Client
from restkv.conditions import MatchRef, NoCondition, RequireAbsent, format_ref
from restkv.config import ClientConfig
from restkv.dispatch import Deferred, ExecutionMode
from restkv.errors import (
    AlreadyPresent,
    BadRequest,
    BatchError,
    IndexingConflict,
    InvalidSearchParam,
    MalformedRef,
    NotFound,
    RequestError,
    RestKVError,
    SearchQueryMalformed,
    ServiceError,
    TransportError,
    TypeMismatch,
    Unauthorized,
    VersionMismatch,
)
from restkv.responses import CollectionResponse, ItemResponse, Response
from restkv.transport import HttpxTransport, Outcome, Transport
from restkv.version import __version__

__all__ = [
    "AlreadyPresent",
    "BadRequest",
    "BatchError",
    "Client",
    "ClientConfig",
    "CollectionResponse",
    "Deferred",
    "ExecutionMode",
    "HttpxTransport",
    "IndexingConflict",
    "InvalidSearchParam",
    "ItemResponse",
    "MalformedRef",
    "MatchRef",
    "NoCondition",
    "NotFound",
    "Outcome",
    "RequestError",
    "RequireAbsent",
    "Response",
    "RestKVError",
    "SearchQueryMalformed",
    "ServiceError",
    "Transport",
    "TransportError",
    "TypeMismatch",
    "Unauthorized",
    "VersionMismatch",
    "__version__",
    "format_ref",
]
