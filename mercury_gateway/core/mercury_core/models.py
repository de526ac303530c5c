from __future__ import annotations

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

from .errors import MercuryError

T = TypeVar("T")

TOKEN_EVENT_MAX_SINGLE_SIZE = 200


@dataclass
class MercurySession:
    """Connection credentials for the indexing service.

    ``token`` is the only mutable field; it is read and replaced under a lock
    because one session is shared by every request handled by the process.
    """

    base_url: str
    token: str
    email: Optional[str] = None
    password: Optional[str] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def current_token(self) -> str:
        with self._lock:
            return self.token

    def replace_token(self, token: str) -> None:
        with self._lock:
            self.token = token

    @property
    def has_credentials(self) -> bool:
        return bool(self.email and self.password)


@dataclass(frozen=True)
class SubscriptionRequest:
    """Body of a ``newsubscription`` call.

    ``extra`` carries any other backend field, usually ``topic1``..``topic4``.
    """

    max_single_size: int
    contract_id: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Own a read-only copy so later edits to the caller's dict don't leak in.
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def from_mapping(cls, body: Mapping[str, Any]) -> "SubscriptionRequest":
        data = dict(body)
        if "max_single_size" not in data:
            raise ValueError("max_single_size is required")
        max_single_size = data.pop("max_single_size")
        contract_id = data.pop("contract_id", None)
        return cls(max_single_size=max_single_size, contract_id=contract_id, extra=data)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.contract_id is not None:
            payload["contract_id"] = self.contract_id
        payload["max_single_size"] = self.max_single_size
        payload.update(self.extra)
        return payload


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of one service operation: exactly one of ``data``/``error`` is set."""

    data: Optional[T] = None
    error: Optional[MercuryError] = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.error is None):
            raise ValueError("OperationResult needs exactly one of data or error")

    @classmethod
    def ok(cls, data: T) -> "OperationResult[T]":
        return cls(data=data)

    @classmethod
    def fail(cls, error: MercuryError) -> "OperationResult[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> Dict[str, Any]:
        return {"data": self.data, "error": None if self.error is None else self.error.render()}
