"""
HTTP transport for the custom workflow API.
"""

import time
import logging
from typing import Any, Dict, List, Optional, Tuple
import requests
from pydantic import ValidationError
from requests.exceptions import RequestException, Timeout, ConnectionError
from custom_workflow.engine.encoder import EncodedRequest, MultipartFile
from custom_workflow.engine.retry_handler import RetryHandler, parse_retry_after
from custom_workflow.shared.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    RATE_LIMIT_STATUS_CODE,
)
from custom_workflow.shared.exceptions import (
    ApiErrorBody,
    MalformedResponse,
    NotFound,
    RemoteRejected,
    TransportError,
)
from custom_workflow.shared.logging_config import get_correlation_id
from custom_workflow.shared.utils import join_url


class HttpTransport:
    """requests-based transport with bearer auth and rate limit retry"""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        *,
        session: Optional[requests.Session] = None,
        retry_handler: Optional[RetryHandler] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.retry_handler = retry_handler or RetryHandler()
        self._session = session or requests.Session()
        self._owns_session = session is None

    def get_headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id
        return headers

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = join_url(self.base_url, path)
        response = self._execute_with_rate_limit_retry("GET", url, params=params)
        return self._parse_json(response, url)

    def poll(self, url: str) -> Tuple[Dict[str, Any], Optional[int]]:
        """GETs an absolute status URL; returns the body and its Retry-After seconds"""
        response = self._execute_with_rate_limit_retry("GET", url)
        return self._parse_json(response, url), parse_retry_after(response.headers.get("Retry-After"))

    def send(self, request: EncodedRequest) -> str:
        """Dispatches an encoded workflow request and returns its status URL"""
        url = join_url(self.base_url, request.target)
        logging.info(
            "Submitting workflow request",
            extra={"url": url, "multipart": request.is_multipart}
        )

        if request.is_multipart:
            with request.open_files() as files:
                response = self._execute_with_rate_limit_retry(
                    request.method, url, data=request.text_parts, files=files
                )
        else:
            response = self._execute_with_rate_limit_retry(
                request.method, url, json=request.json_body
            )

        return self._parse_status_url(response, url)

    def _execute_with_rate_limit_retry(self, method: str, url: str, **kwargs) -> requests.Response:
        attempt = 0

        while True:
            _rewind(kwargs.get("files"))
            try:
                response = self._session.request(
                    method,
                    url,
                    headers=self.get_headers(),
                    timeout=self.timeout,
                    **kwargs
                )
            except (Timeout, ConnectionError) as e:
                raise TransportError(
                    f"Network error: {str(e)}", url=url, error_class=type(e).__name__
                ) from e
            except RequestException as e:
                raise TransportError(f"Request failed: {str(e)}", url=url) from e

            if response.status_code == RATE_LIMIT_STATUS_CODE:
                retry, delay = self.retry_handler.should_retry(
                    attempt, response.headers.get("Retry-After"), url=url
                )
                if retry:
                    time.sleep(delay)
                    attempt += 1
                    continue

            self._raise_for_status(response, url)
            return response

    def _raise_for_status(self, response: requests.Response, url: str) -> None:
        if response.status_code == 404:
            raise NotFound(f"Resource not found: {url}", url=url)

        if response.status_code >= 400:
            body = _parse_error_body(response)
            logging.warning(
                "Remote API rejected request",
                extra={"url": url, "status_code": response.status_code}
            )
            raise RemoteRejected(
                response.status_code,
                body.message or response.reason or "Request rejected",
                body.errors,
                url=url
            )

    def _parse_json(self, response: requests.Response, url: str) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse(f"Response is not valid JSON: {url}", url=url) from e

        if not isinstance(data, dict):
            raise MalformedResponse(f"Response is not a JSON object: {url}", url=url)
        return data

    def _parse_status_url(self, response: requests.Response, url: str) -> str:
        status_url = self._parse_json(response, url).get("status_url")
        if not status_url:
            raise MalformedResponse(f"Response missing status_url: {url}", url=url)
        return status_url

    def close(self) -> None:
        """Close the underlying session when this instance owns it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


def _rewind(files: Optional[List[MultipartFile]]) -> None:
    # A retried multipart request must stream each file from the start
    for _, (_, handle) in files or []:
        handle.seek(0)


def _parse_error_body(response: requests.Response) -> ApiErrorBody:
    try:
        return ApiErrorBody.model_validate(response.json())
    except (ValueError, ValidationError):
        return ApiErrorBody()
