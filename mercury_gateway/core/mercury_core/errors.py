"""Custom exceptions for Mercury core services."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


class MercuryError(RuntimeError):
    """Tagged failure of a single call against the indexing service.

    ``kind`` is one of ``transport``, ``http``, ``auth``, ``graphql``,
    ``timeout``, ``cancelled``, ``aggregate`` or ``unexpected``.
    """

    def __init__(
        self,
        kind: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Any = None,
        causes: Sequence["MercuryError"] = (),
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.body = body
        self.causes: List[MercuryError] = list(causes)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"MercuryError(kind={self.kind!r}, message={self.message!r})"

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.status_code is not None:
            out["status_code"] = self.status_code
        if self.body is not None:
            out["body"] = self.body
        if self.causes:
            out["causes"] = [c.as_dict() for c in self.causes]
        cause = self.__cause__
        if cause is not None and not isinstance(cause, MercuryError):
            out["cause"] = f"{type(cause).__name__}: {cause}"
        return out

    def render(self) -> str:
        """String form handed to callers.

        Aggregate failures render as their bare message; every other kind
        renders as JSON of :meth:`as_dict` so status, body and kind survive.
        """

        if self.kind == "aggregate":
            return self.message
        return json.dumps(self.as_dict(), default=str)

    @classmethod
    def wrap(cls, exc: BaseException) -> "MercuryError":
        """Return ``exc`` if already tagged, otherwise tag it as ``unexpected``."""

        if isinstance(exc, MercuryError):
            return exc
        err = cls("unexpected", f"{type(exc).__name__}: {exc}")
        err.__cause__ = exc
        return err
