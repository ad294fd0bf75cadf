# exchange/services/base.py
from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar

import aiohttp

from exchange.errors import SigningError
from exchange.models import Credentials, Parameters
from exchange.services.endpoints import DEFAULT_ENDPOINTS, Endpoints, make_endpoints_from_cfg
from infra.http_client import HttpClient, ParamBuilder

K = TypeVar("K", bound=ParamBuilder)
C = TypeVar("C", bound="BaseClient")


class BaseClient:
    """
    Endpoint facade: picks a path and a verb, seeds the parameter record and
    hands back the request kind for the caller to refine and await.
    """
    # "none": anonymous, "key": API key header only, "signed": API key + signature
    auth = "none"

    def __init__(self,
                 http: HttpClient,
                 credentials: Optional[Credentials] = None,
                 endpoints: Endpoints = DEFAULT_ENDPOINTS,
                 ) -> None:
        self._http = http
        self._credentials = self._scoped(credentials)
        self.endpoints = endpoints

    @classmethod
    def _scoped(cls, credentials: Optional[Credentials]) -> Optional[Credentials]:
        if cls.auth == "signed":
            if credentials is None or not credentials.secret_key:
                raise SigningError(f"{cls.__name__} signs every request and needs a secret key")
            return credentials
        if credentials is None or cls.auth == "none":
            return None
        return Credentials(api_key=credentials.api_key)

    @classmethod
    def _connect(cls: Type[C],
                 url: str,
                 credentials: Optional[Credentials],
                 session: Optional[aiohttp.ClientSession] = None,
                 ) -> C:
        endpoints = Endpoints(rest_base=url.rstrip("/"))
        return cls(HttpClient(endpoints.rest_base, session=session), credentials, endpoints)

    @classmethod
    def from_cfg(cls: Type[C], cfg: Mapping[str, Any], *, session: Optional[aiohttp.ClientSession] = None) -> C:
        endpoints = make_endpoints_from_cfg(cfg)
        http = HttpClient(endpoints.rest_base, session=session)
        return cls(http, Credentials.from_cfg(cfg), endpoints)

    @property
    def http(self) -> HttpClient:
        return self._http

    def _sibling(self, cls: Type[C]) -> C:
        # shares the transport, copies only immutable configuration
        return cls(self._http, self._credentials, self.endpoints)

    def _request(self, kind: Type[K], method: str, path: str, **fields: Any) -> K:
        return kind(Parameters(**fields), method, path, self._http, self._credentials)

    async def __aenter__(self: C) -> C:
        await self._http.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._http.base_url}, {self._credentials!r})"
