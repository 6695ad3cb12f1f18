from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests

from kyasms.config import ClientConfig
from kyasms.exceptions import KyaSmsError, NetworkError, classify_error

log = logging.getLogger(__name__)

API_KEY_HEADER = "APIKEY"

DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "User-Agent": "kyasms-python",
}

_INVALID_JSON = object()


class HttpClient:
    """
    JSON transport for the KYA SMS API.

    Returns the decoded body of 2xx responses. Everything else is raised as a
    KyaSmsError subclass, classified once here.

    Headers, the API key included, are sent with each request, so a session
    passed in by the caller can be shared between clients.
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        self.base_url = config.base_url
        self.timeout = config.timeout
        self.debug = config.debug
        self.api_key = config.api_key or ""
        self.session = session or requests.Session()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def set_api_key(self, api_key: str) -> None:
        self.api_key = api_key

    def set_base_url(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", path, body=body)

    def put(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("PUT", path, body=body)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def request(
            self,
            method: str,
            path: str,
            params: Optional[Dict[str, Any]] = None,
            body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {**DEFAULT_HEADERS, API_KEY_HEADER: self.api_key}
        if self.debug:
            log.info("kyasms_request", extra={"method": method, "path": path, "params": params, "body": body})

        t0 = time.time()
        try:
            resp = self.session.request(
                method, url, params=params, json=body, headers=headers, timeout=self.timeout
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            log.debug("http_request_failed", extra={"method": method, "path": path, "err": str(e)})
            raise NetworkError("Unable to reach the KYA SMS server", original_error=e) from e
        except requests.RequestException as e:
            raise KyaSmsError(str(e)) from e

        dt_ms = int((time.time() - t0) * 1000)
        log.debug("http_request_done", extra={"method": method, "path": path, "status": resp.status_code, "ms": dt_ms})

        data = _decode_json(resp)
        body_data = None if data is _INVALID_JSON else data
        if self.debug:
            log.info(
                "kyasms_response",
                extra={"method": method, "path": path, "status": resp.status_code, "body": body_data},
            )

        if not 200 <= resp.status_code < 300:
            # 1xx and 3xx count as failures too, not only 4xx/5xx
            text = f"{resp.status_code} {resp.reason} for url: {resp.url}"
            err = requests.HTTPError(text, response=resp)
            raise classify_error(resp.status_code, body_data, text) from err

        if data is _INVALID_JSON:
            raise KyaSmsError(f"Invalid JSON in response to {method} {path}")
        # empty body and a literal JSON null both mean "nothing to report"
        if data is None:
            return {}
        return data


def _decode_json(resp: requests.Response) -> Any:
    """Decoded body, None for an empty body, _INVALID_JSON when it does not parse."""
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return _INVALID_JSON
