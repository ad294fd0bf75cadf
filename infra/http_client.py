# infra/http_client.py
from __future__ import annotations

import asyncio
import copy
import json
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, Mapping, Optional

import aiohttp
from yarl import URL

from exchange.errors import RequestBuildError, RequestRejected, SerializationError, TransportError
from exchange.models import Credentials, Parameters
from utils.logger import logger, mask
from utils.time import utc_ms

API_KEY_HEADER = "X-MBX-APIKEY"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})
BODY_METHODS = frozenset({"POST", "PUT"})


@dataclass
class Response:
    status: int
    reason: str
    body: str
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except json.JSONDecodeError as e:
            raise SerializationError(f"invalid json: {self.body[:256]}") from e


@dataclass
class PreparedRequest:
    method: str
    path: str
    query: str = ""
    body: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Parameters] = None


def _reason(status: int, fallback: Optional[str]) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return fallback or "UNKNOWN"


def classify(response: Response) -> Response:
    """
    2xx is returned as is. 4xx raises RequestRejected with code, reason and body.
    Anything else (3xx, 5xx) is logged as a warning and still returned.
    """
    status = response.status
    if 200 <= status < 300:
        return response
    if 400 <= status < 500:
        raise RequestRejected(status, response.reason, response.body)
    logger.warning(f"HTTP {status} {response.reason}")
    return response


class HttpClient:
    """
    Owns (or borrows) the aiohttp session that every request builder of a
    client handle dispatches through. Sibling clients share one instance.
    """

    def __init__(self,
                 base_url: str,
                 *,
                 session: Optional[aiohttp.ClientSession] = None,
                 timeout_ms: Optional[int] = None,
                 ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self._owned_session = session is None
        # None leaves deadlines to the caller; recvWindow is a wire parameter, not a local timeout
        self.timeout_ms = timeout_ms

        logger.debug(f"HttpClient init base_url={self.base_url} owned_session={self._owned_session}")

    # ---- async context manager ----------------------------------------------------
    async def __aenter__(self) -> "HttpClient":
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owned_session and self.session is not None and not self.session.closed:
            await self.session.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            if not self._owned_session:
                raise TransportError("borrowed session is closed")
            total = self.timeout_ms / 1000.0 if self.timeout_ms else None
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=total), raise_for_status=False, trust_env=True
            )
        return self.session

    def _timestamp_ms(self) -> int:
        return utc_ms()

    async def request(self,
                      method: str,
                      path: str,
                      *,
                      query: str = "",
                      body: Optional[str] = None,
                      headers: Optional[Mapping[str, str]] = None,
                      ) -> Response:
        """
        Single network round trip. The query string is sent exactly as encoded
        so that it matches the signed bytes. No retries.
        """
        session = self._ensure_session()
        url = self.base_url + path + ("?" + query if query else "")
        try:
            async with session.request(
                method,
                URL(url, encoded=True),
                data=body if body else None,
                headers=dict(headers or {}),
            ) as resp:
                text = await resp.text()
                return Response(
                    status=resp.status,
                    reason=_reason(resp.status, resp.reason),
                    body=text,
                    headers=dict(resp.headers),
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Network error: {e} when requesting {method} {path}") from e
        except UnicodeDecodeError as e:
            raise SerializationError(f"undecodable response body from {method} {path}") from e


class ParamBuilder:
    """
    One outbound request: a parameter record, a verb + path and optional
    credentials. Request kinds subclass this together with the capability
    mixins for the fields their endpoint accepts.
    """

    def __init__(self,
                 params: Parameters,
                 method: str,
                 path: str,
                 http: HttpClient,
                 credentials: Optional[Credentials] = None,
                 ) -> None:
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise RequestBuildError(f"unsupported HTTP method {method}")
        self.params = params
        self.method = method
        self.path = path
        self._http = http
        self._credentials = credentials

    def prepare(self) -> PreparedRequest:
        """
        Sign a copy of the record (the builder's own record is never signed) and
        place it in the body for POST/PUT or in the query string otherwise.
        """
        creds = self._credentials
        api_key = creds.api_key if creds else None
        secret_key = creds.secret_key if creds else None

        if self.method != "GET" and not api_key and secret_key is None:
            raise RequestBuildError(f"{self.method} {self.path} requires credentials")

        params = copy.copy(self.params)
        headers: Dict[str, str] = {}
        if api_key:
            headers[API_KEY_HEADER] = api_key
        # an empty secret raises SigningError
        if secret_key is not None:
            params.sign(secret_key, self._http._timestamp_ms())

        encoded = params.encode()
        if self.method in BODY_METHODS:
            headers["Content-Type"] = FORM_CONTENT_TYPE
            return PreparedRequest(self.method, self.path, body=encoded, headers=headers, params=params)
        return PreparedRequest(self.method, self.path, query=encoded, headers=headers, params=params)

    async def response(self) -> Response:
        req = self.prepare()
        logger.debug(
            f"{req.method} {req.path} signed={req.params.is_signed} "
            f"key={mask(req.headers.get(API_KEY_HEADER))}"
        )
        resp = await self._http.request(req.method, req.path, query=req.query, body=req.body, headers=req.headers)
        return classify(resp)

    async def text(self) -> str:
        return (await self.response()).text()

    async def json(self) -> Any:
        return (await self.response()).json()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.method} {self.path})"
