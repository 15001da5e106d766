# personprovider/adapters/rest_session.py
import json
import logging
from typing import Any, Dict, Optional, Type

import requests
from pydantic import BaseModel, ValidationError

from ..exceptions import PersonError, PersonDecodeError, ResourceNotFoundError

log = logging.getLogger(__name__)

DEFAULT_API_TIMEOUT = 60  # seconds

PATCH_OPS = ("add", "replace", "remove")

class PersonSession:
    """
    Shared HTTP session for the Person REST API.

    All requests go to ``http://{host}/{uri}`` with a JSON body.  The
    configuration is fixed at construction; the underlying
    ``requests.Session`` pools connections and may be used by several
    handlers at once.
    """
    def __init__(self, host: str, timeout: float = DEFAULT_API_TIMEOUT, insecure: bool = True):
        self._host = host
        self._prefix = f"http://{host}/"
        self._timeout = timeout or DEFAULT_API_TIMEOUT
        self._insecure = insecure

        self._client = requests.Session()
        self._client.verify = not insecure

    @property
    def host(self) -> str:
        return self._host

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def insecure(self) -> bool:
        return self._insecure

    def get(self, uri: str, model: Type[BaseModel] = None):
        """Issue a GET request against the Person REST API"""
        return self._request("GET", uri, None, model)

    def post(self, uri: str, payload: Any, model: Type[BaseModel] = None):
        """Issue a POST request against the Person REST API"""
        return self._request("POST", uri, payload, model)

    def put(self, uri: str, payload: Any, model: Type[BaseModel] = None):
        """Issue a PUT request against the Person REST API"""
        return self._request("PUT", uri, payload, model)

    def patch(self, uri: str, payload: Any, patch_op: str, model: Type[BaseModel] = None):
        """
        Issue a PATCH request against the Person REST API.
        The payload is sent wrapped as ``{patch_op: payload}``; allowed
        operations are add, replace and remove.
        """
        if patch_op not in PATCH_OPS:
            raise ValueError(f"Unsupported patch operation: {patch_op} (expected one of {', '.join(PATCH_OPS)})")
        log.debug("PATCH op %s data %s", patch_op, payload)
        return self._request("PATCH", uri, {patch_op: payload}, model)

    def delete(self, uri: str, payload: Any = None, model: Type[BaseModel] = None):
        """Issue a DELETE request; payload and model are only for backends that use them"""
        return self._request("DELETE", uri, payload, model)

    def rest_request(self, verb: str, uri: str, payload: Any = None) -> requests.Response:
        """
        Issue a request and return the whole ``requests.Response`` (headers
        included).  Non-2xx responses still raise PersonError.
        """
        resp = self._send(verb, uri, payload)
        self._fetch_body(verb, resp.request.url, resp)
        return resp

    def _url(self, uri: str) -> str:
        return self._prefix + uri.lstrip("/")

    def _encode(self, verb: str, url: str, payload: Any) -> Optional[str]:
        if payload is None:
            return None
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(mode="json")
        try:
            return json.dumps(payload)
        except (TypeError, ValueError) as ex:
            raise PersonError(verb, url, cause=ex) from ex

    def _send(self, verb: str, uri: str, payload: Any) -> requests.Response:
        url = self._url(uri)
        body = self._encode(verb, url, payload)

        try:
            req = self._client.prepare_request(
                requests.Request(verb, url, data=body, headers={"Content-Type": "application/json"})
            )
        except (requests.RequestException, ValueError) as ex:
            raise PersonError(verb, url, cause=ValueError(f"request construction failed: {ex}")) from ex

        log.info("Request %s with url %s", verb, url)
        try:
            return self._client.send(req, timeout=self._timeout)
        except requests.RequestException as ex:
            log.error("Client error for URL %s: %s", url, ex)
            log.info("Failed request:\n%s\n", _dump_request(req))
            raise PersonError(verb, url, cause=ex) from ex

    def _fetch_body(self, verb: str, url: str, resp: requests.Response) -> bytes:
        if resp.status_code == 204:
            # no content in the response
            return b""

        content = resp.content or b""
        if 200 <= resp.status_code <= 299:
            return content

        if not content.strip():
            log.error("Error in url %s; status %s with no body", url, resp.status_code)
            raise _error_for_status(verb, url, resp.status_code,
                                    message=f"{resp.status_code} {resp.reason or ''}".strip())

        message, code = _render_error_body(resp)
        log.info("Error code %s parsed resp: %s", resp.status_code, message)
        raise _error_for_status(verb, url, resp.status_code, message=message, code=code)

    def _request(self, verb: str, uri: str, payload: Any, model: Type[BaseModel] = None):
        resp = self._send(verb, uri, payload)
        url = resp.request.url if resp.request is not None else self._url(uri)
        content = self._fetch_body(verb, url, resp)
        if not content:
            return None

        try:
            data = json.loads(content)
        except ValueError as ex:
            raise PersonDecodeError(verb, url, http_status=resp.status_code,
                                    cause=ValueError(f"invalid JSON in response: {ex}")) from ex

        if model is None:
            return data
        try:
            return model.model_validate(data)
        except ValidationError as ex:
            raise PersonDecodeError(verb, url, http_status=resp.status_code, cause=ex) from ex

def _error_for_status(verb: str, url: str, status: int, message: str = None, code: int = None) -> PersonError:
    cls = ResourceNotFoundError if status == 404 else PersonError
    return cls(verb, url, http_status=status, message=message, code=code)

def _render_error_body(resp: requests.Response):
    """Best-effort rendering of a server error payload as (message, code)"""
    try:
        payload = json.loads(resp.content)
    except ValueError:
        return resp.text.strip(), None

    if isinstance(payload, dict):
        code = payload.get("code")
        if not isinstance(code, int) or isinstance(code, bool):
            code = None
        if isinstance(payload.get("message"), str):
            return payload["message"], code
        return json.dumps(payload, sort_keys=True), code
    return json.dumps(payload), None

def _dump_request(req: requests.PreparedRequest) -> str:
    lines = [f"{req.method} {req.url}"]
    lines.extend(f"{name}: {value}" for name, value in req.headers.items())
    body = req.body
    if isinstance(body, bytes):
        body = body.decode("utf-8", "replace")
    if body:
        lines.extend(["", body])
    return "\n".join(lines)
