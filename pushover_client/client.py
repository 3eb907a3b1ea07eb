"""Pushover API clients: construction, notify and response classification."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

import httpx

from .config import DEFAULT_TIMEOUT
from .constants import BASE_URL, MESSAGE_HEADERS, MESSAGES_PATH
from .errors import NotificationError
from .schemas import MessageResponse
from .validation import CLIENT_OPTION_FIELDS, validate_client_options, validate_message

logger = logging.getLogger(__name__)

ERR_INVALID_RESPONSE = "invalid API response"
ERR_RATE_LIMITED = "rate-limited"
ERR_INVALID_REQUEST = "invalid request"
ERR_SERVER = "internal server error"
ERR_UNKNOWN = "unknown"

_DEFAULT_PORTS = {"http": 80, "https": 443}
_CLIENT_OPTION_KEYS = frozenset(spec.name for spec in CLIENT_OPTION_FIELDS)


def _errf(message: str, err: Optional[object]) -> str:
    if isinstance(err, BaseException):
        err = str(err) or type(err).__name__
    if err:
        return f"{message}: {err}"
    return message


@dataclass
class NotifyResult:
    ok: bool
    error: Optional[str] = None
    body: Any = None

    def __iter__(self) -> Iterator[Any]:
        return iter((self.ok, self.error, self.body))

    @property
    def response(self) -> Optional[MessageResponse]:
        return MessageResponse.parse_body(self.body)

    def raise_for_error(self) -> "NotifyResult":
        if not self.ok:
            raise NotificationError(self)
        return self


@dataclass(frozen=True)
class Endpoint:
    scheme: str
    host: str
    port: int
    base_path: str

    @property
    def origin(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}"

    def url_for(self, path: str) -> str:
        return f"{self.origin}{self.base_path}/{path.lstrip('/')}"


def parse_base_url(base_url: str) -> Tuple[Optional[Endpoint], Optional[str]]:
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as exc:
        return None, _errf("invalid `base_url`", exc)

    if url.scheme not in _DEFAULT_PORTS or not url.host:
        return None, f"invalid `base_url`: {base_url!r} (expected an http(s) URL with a host)"

    endpoint = Endpoint(
        scheme=url.scheme,
        host=url.host,
        port=url.port or _DEFAULT_PORTS[url.scheme],
        base_path=url.path.rstrip("/"),
    )
    return endpoint, None


def read_body(response: httpx.Response) -> Tuple[Any, Optional[str]]:
    """Decode a response body, keeping the raw text when it is not JSON.

    The second item is a secondary error that does not stop classification.
    """

    if not response.content:
        return None, "empty response body"

    text = response.text
    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type.lower():
        return text, None

    try:
        return json.loads(text), None
    except (ValueError, RecursionError) as exc:
        return text, _errf("failed decoding json response body", exc)


def _is_success_body(body: Any) -> bool:
    if not isinstance(body, Mapping):
        return False
    status = body.get("status")
    return status == 1 and not isinstance(status, bool)


def classify_response(status: Any, body: Any, body_error: Optional[str] = None) -> NotifyResult:
    """Map an HTTP status code and decoded body onto a :class:`NotifyResult`.

    The body is returned in every branch so callers can inspect the
    ``errors`` the service reported.
    """

    if isinstance(status, bool) or not isinstance(status, int):
        return NotifyResult(ok=False, error=ERR_INVALID_RESPONSE, body=body)

    if status == 200:
        if _is_success_body(body):
            return NotifyResult(ok=True, error=None, body=body)
        return NotifyResult(ok=False, error=_errf(ERR_INVALID_RESPONSE, body_error), body=body)

    if status == 429:
        error = ERR_RATE_LIMITED
    elif 400 <= status < 500:
        error = ERR_INVALID_REQUEST
    elif status >= 500:
        error = ERR_SERVER
    else:
        error = ERR_UNKNOWN
    return NotifyResult(ok=False, error=error, body=body)


class _BaseClient:
    def __init__(self, token: str, user_key: str, base_url: Optional[str] = None) -> None:
        options: Dict[str, Any] = {"token": token, "user_key": user_key}
        if base_url is not None:
            options["base_url"] = base_url
        error = validate_client_options(options)
        if error is not None:
            raise ValueError(error)

        endpoint, error = parse_base_url(base_url or BASE_URL)
        if endpoint is None:
            raise ValueError(error)

        self.token = token
        self.user_key = user_key
        self.endpoint = endpoint

    @property
    def base_path(self) -> str:
        return self.endpoint.base_path

    @property
    def messages_url(self) -> str:
        return self.endpoint.url_for(MESSAGES_PATH)

    def _prepare(self, message: Any) -> Tuple[Optional[bytes], Optional[NotifyResult]]:
        payload, error = validate_message(message)
        if payload is None:
            return None, NotifyResult(ok=False, error=error)

        wire = payload.with_credentials(self.token, self.user_key).to_wire()
        try:
            content = json.dumps(wire, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            return None, NotifyResult(ok=False, error=_errf("failed encoding request body", exc))
        return content, None

    def _transport_failure(self, exc: httpx.HTTPError) -> NotifyResult:
        logger.warning("Failed to send notification to %s: %s", self.messages_url, exc)
        return NotifyResult(ok=False, error=_errf("failed sending request", exc))

    def _finish(self, response: httpx.Response) -> NotifyResult:
        body, body_error = read_body(response)
        result = classify_response(response.status_code, body, body_error)
        if result.ok:
            logger.debug("Notification accepted (request %s)", body.get("request"))
        else:
            logger.warning(
                "Notification not accepted (HTTP %s): %s", response.status_code, result.error
            )
        return result


class PushoverClient(_BaseClient):
    """Blocking client; one ``POST`` per :meth:`notify`, never retried.

    An injected ``http_client`` is used as-is and left open on :meth:`close`;
    otherwise the client creates and owns its own ``httpx.Client``.
    Connections are opened lazily by httpx, so an unreachable host is reported
    by the first :meth:`notify` as ``failed sending request``, not by :func:`new`.
    """

    def __init__(
        self,
        token: str,
        user_key: str,
        base_url: Optional[str] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(token, user_key, base_url)
        self._owns_http = http_client is None
        if http_client is None:
            http_client = httpx.Client(timeout=timeout if timeout is not None else DEFAULT_TIMEOUT)
        self.http_client = http_client

    def notify(self, message: Any) -> NotifyResult:
        content, failure = self._prepare(message)
        if failure is not None:
            return failure

        try:
            response = self.http_client.post(
                self.messages_url, content=content, headers=dict(MESSAGE_HEADERS)
            )
        except httpx.HTTPError as exc:
            return self._transport_failure(exc)
        return self._finish(response)

    def close(self) -> None:
        if self._owns_http:
            self.http_client.close()

    def __enter__(self) -> "PushoverClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncPushoverClient(_BaseClient):
    """Asyncio counterpart of :class:`PushoverClient` built on ``httpx.AsyncClient``."""

    def __init__(
        self,
        token: str,
        user_key: str,
        base_url: Optional[str] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(token, user_key, base_url)
        self._owns_http = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                timeout=timeout if timeout is not None else DEFAULT_TIMEOUT
            )
        self.http_client = http_client

    async def notify(self, message: Any) -> NotifyResult:
        content, failure = self._prepare(message)
        if failure is not None:
            return failure

        try:
            response = await self.http_client.post(
                self.messages_url, content=content, headers=dict(MESSAGE_HEADERS)
            )
        except httpx.HTTPError as exc:
            return self._transport_failure(exc)
        return self._finish(response)

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http_client.aclose()

    async def __aenter__(self) -> "AsyncPushoverClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def _build(cls, options: Any, **kwargs: Any):
    error = validate_client_options(options)
    if error is not None:
        logger.debug("Rejected client options: %s", error)
        return None, error
    try:
        client = cls(
            options["token"],
            options["user_key"],
            options.get("base_url"),
            **kwargs,
        )
    except ValueError as exc:
        return None, str(exc)
    return client, None


def new(
    options: Mapping[str, Any],
    *,
    http_client: Optional[httpx.Client] = None,
    timeout: Optional[float] = None,
) -> Tuple[Optional[PushoverClient], Optional[str]]:
    """Create a :class:`PushoverClient` from an options mapping.

    Returns ``(client, None)`` or ``(None, error)``; bad options never raise.
    """

    return _build(PushoverClient, options, http_client=http_client, timeout=timeout)


def anew(
    options: Mapping[str, Any],
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> Tuple[Optional[AsyncPushoverClient], Optional[str]]:
    return _build(AsyncPushoverClient, options, http_client=http_client, timeout=timeout)


def _split_options(options_and_message: Mapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    options: Dict[str, Any] = {}
    message: Dict[str, Any] = {}
    for key, value in options_and_message.items():
        if key in _CLIENT_OPTION_KEYS:
            options[key] = value
        else:
            message[key] = value
    return options, message


def notify(
    options_and_message: Mapping[str, Any],
    *,
    http_client: Optional[httpx.Client] = None,
    timeout: Optional[float] = None,
) -> NotifyResult:
    """Build a client, send one message and close the client again.

    ``options_and_message`` carries the client options (``token``,
    ``user_key``, ``base_url``) next to the message fields.
    """

    if not isinstance(options_and_message, Mapping):
        return NotifyResult(
            ok=False, error=f"invalid options type: {type(options_and_message).__name__}"
        )
    options, message = _split_options(options_and_message)
    client, error = new(options, http_client=http_client, timeout=timeout)
    if client is None:
        return NotifyResult(ok=False, error=error)
    with client:
        return client.notify(message)


async def anotify(
    options_and_message: Mapping[str, Any],
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> NotifyResult:
    if not isinstance(options_and_message, Mapping):
        return NotifyResult(
            ok=False, error=f"invalid options type: {type(options_and_message).__name__}"
        )
    options, message = _split_options(options_and_message)
    client, error = anew(options, http_client=http_client, timeout=timeout)
    if client is None:
        return NotifyResult(ok=False, error=error)
    async with client:
        return await client.notify(message)
