"""Upstream weather API client: one bounded-timeout GET per call."""

import logging
import os
from collections.abc import Sequence
from typing import Any

import httpx

from weathervoice.config.schema import UpstreamConfig
from weathervoice.errors import ConfigError, ParseError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class WeatherFetcher:
    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = "weathervoice/0.1.0",
        api_key: str | None = None,
        api_key_param: str = "apikey",
        api_key_env: str | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.user_agent = user_agent
        self.api_key = api_key
        self.api_key_param = api_key_param
        self.api_key_env = api_key_env

    @classmethod
    def from_config(cls, upstream: UpstreamConfig) -> "WeatherFetcher":
        """Build a fetcher. The credential is read from the environment per call."""
        return cls(
            url=upstream.url,
            timeout=upstream.timeout_seconds,
            user_agent=upstream.user_agent,
            api_key_param=upstream.api_key_param,
            api_key_env=upstream.api_key_env,
        )

    def credential(self) -> str | None:
        """Explicit key, else the configured environment variable.

        Raises ConfigError when an environment variable is configured but unset.
        """
        if self.api_key:
            return self.api_key
        if not self.api_key_env:
            return None
        api_key = os.environ.get(self.api_key_env, "")
        if not api_key:
            raise ConfigError(f"{self.api_key_env} not set")
        return api_key

    def fetch(
        self,
        params: dict[str, Any] | None = None,
        required_fields: Sequence[str] = (),
        expect_list: bool = False,
    ) -> Any:
        """Issue the request and return decoded JSON.

        Raises ConfigError when the credential is missing, UpstreamError on
        transport failure or non-2xx status, and ParseError when the body is
        not the expected shape.
        """
        query = dict(params or {})
        api_key = self.credential()
        if api_key:
            query[self.api_key_param] = api_key
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}

        try:
            resp = httpx.get(
                self.url, params=query, headers=headers, timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            logger.error("Upstream %s timed out after %.1fs", self.url, self.timeout)
            raise UpstreamError(f"Timeout after {self.timeout:.0f}s: {e}") from e
        except httpx.RequestError as e:
            logger.error("Upstream request failed: %s -> %s", self.url, e)
            raise UpstreamError(f"Request failed: {e}") from e

        if not resp.is_success:
            body = _decode_body(resp)
            logger.error("Upstream %s returned %d: %s", self.url, resp.status_code, body)
            raise UpstreamError(
                f"HTTP {resp.status_code} from upstream", resp.status_code, body
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ParseError(f"Upstream body is not JSON: {e}") from e

        if expect_list:
            if not isinstance(data, list):
                raise ParseError(f"Expected a list, got {type(data).__name__}")
            return data

        if not isinstance(data, dict):
            raise ParseError(f"Expected an object, got {type(data).__name__}")
        missing = [f for f in required_fields if f not in data]
        if missing:
            raise ParseError(f"Missing fields in upstream payload: {', '.join(missing)}")
        return data


def _decode_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text
