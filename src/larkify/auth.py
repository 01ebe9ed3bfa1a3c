"""Access-token providers.

The SDK never acquires or refreshes credentials itself.  It asks a
:class:`TokenProvider` for a bearer token before every request and treats
the result as an opaque string.

Two providers ship with the package:

* :class:`StaticTokenProvider` -- a fixed tenant or user access token.
* :class:`CachedTokenProvider` -- reads the token cache file that an
  external login helper maintains::

      {
        "access_token": "u-xxx",
        "refresh_token": "ur-xxx",
        "expires_at": 1760000000,
        "app_id": "cli_xxx",
        "app_secret": "xxx"
      }
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from larkify.errors import LarkifyAuthError

# Treat tokens this close to expiry as already expired.
EXPIRY_SKEW_SECONDS = 300

_RELOGIN_HINT = "Run the login helper again to refresh the token cache."


@runtime_checkable
class TokenProvider(Protocol):
    """Anything that can hand out a bearer token."""

    def get_access_token(self) -> str:
        ...


class StaticTokenProvider:
    """Always returns the token it was built with."""

    __slots__ = ("_token",)

    def __init__(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        self._token = token

    def get_access_token(self) -> str:
        return self._token

    def __repr__(self) -> str:
        suffix = self._token[-4:] if len(self._token) >= 4 else "****"
        return f"StaticTokenProvider(token='...{suffix}')"


@dataclass
class TokenCache:
    """The persisted user-token record.

    Attributes
    ----------
    access_token:
        Bearer token sent with requests.
    refresh_token:
        Token the login helper uses to renew ``access_token``.
    expires_at:
        Expiry as Unix seconds.
    app_id, app_secret:
        Credentials of the Feishu app the token was issued to.
    """

    access_token: str = ""
    refresh_token: str = ""
    expires_at: int = 0
    app_id: str = ""
    app_secret: str = ""

    @classmethod
    def load(cls, path: str | Path) -> TokenCache:
        """Read a cache file.  Unknown keys are ignored."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(
            access_token=data.get("access_token", ""),
            refresh_token=data.get("refresh_token", ""),
            expires_at=int(data.get("expires_at", 0)),
            app_id=data.get("app_id", ""),
            app_secret=data.get("app_secret", ""),
        )

    def dump(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")

    def is_expired(self, now: float | None = None, skew: int = EXPIRY_SKEW_SECONDS) -> bool:
        if not self.access_token:
            return True
        current = time.time() if now is None else now
        return current >= self.expires_at - skew

    def __repr__(self) -> str:
        return f"TokenCache(app_id={self.app_id!r}, expires_at={self.expires_at!r})"


class CachedTokenProvider:
    """Serve the access token from a :class:`TokenCache` file.

    The file is re-read on every call so that an external helper can
    refresh it while a long write is running.

    Raises
    ------
    LarkifyAuthError
        If the file is missing, unreadable, or holds an expired token.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def get_access_token(self) -> str:
        try:
            cache = TokenCache.load(self._path)
        except (OSError, ValueError, AttributeError) as exc:
            raise LarkifyAuthError(
                message=f"Cannot read token cache {self._path}: {exc}",
                context={"path": str(self._path), "hint": _RELOGIN_HINT},
                cause=exc,
            ) from exc
        if cache.is_expired():
            raise LarkifyAuthError(
                message="Cached access token has expired.",
                context={
                    "path": str(self._path),
                    "expires_at": cache.expires_at,
                    "hint": _RELOGIN_HINT,
                },
            )
        return cache.access_token
