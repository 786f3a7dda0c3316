"""
Authenticated JSON transport shared by the CI provider probers.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from reaper import __version__
from reaper.core.exceptions import DecodeError, RequestFailedError, UnexpectedStatusError
from reaper.core.logging import get_logger

logger = get_logger(__name__)

USER_AGENT = f"ci-reaper/{__version__}"
SUCCESS_CODES = frozenset({200, 204})


class ProviderTransport:
    """Issues requests against one provider's API on a shared ``httpx.AsyncClient``.

    The client is owned by the caller and may be shared by any number of
    transports and concurrent tasks.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        authorization: str,
        accept: str = "application/json",
        name: str = "provider",
    ):
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "User-Agent": USER_AGENT,
            "Authorization": authorization,
            "Accept": accept,
        }
        self.name = name

    def url_for(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Issue a request and check its status.

        Args:
            method: HTTP method
            path: Path relative to the provider base URL
            params: Optional query parameters

        Returns:
            The response, whose status is 200 or 204

        Raises:
            RequestFailedError: If no response was received
            UnexpectedStatusError: If the status is anything else
        """
        url = self.url_for(path)
        logger.info("%s fetching: %s %s", self.name, method, url)

        try:
            response = await self._client.request(method, url, headers=self._headers, params=params)
        except httpx.RequestError as exc:
            raise RequestFailedError(f"{method} {url} failed: {exc}", url=url) from exc

        if response.status_code not in SUCCESS_CODES:
            body = response.content.decode("utf-8", errors="replace")
            raise UnexpectedStatusError(response.status_code, body, method, url)

        return response

    async def request_json(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Issue a request and decode its JSON body."""
        response = await self.request(method, path, params=params)
        url = self.url_for(path)

        raw = response.content
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Response from {url} is not UTF-8", raw_body=raw, url=url) from exc

        try:
            return json.loads(text)
        except ValueError as exc:
            raise DecodeError(f"failed to decode: {text}", raw_body=text, url=url) from exc

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request_json("GET", path, params=params)

    async def post(self, path: str) -> httpx.Response:
        return await self.request("POST", path)

    async def delete(self, path: str) -> httpx.Response:
        return await self.request("DELETE", path)


def travis_transport(client: httpx.AsyncClient, token: str, base_url: str = "https://api.travis-ci.org") -> ProviderTransport:
    """Transport speaking Travis API v2."""
    return ProviderTransport(
        client,
        base_url,
        authorization=f"token {token}",
        accept="application/vnd.travis-ci.2+json",
        name="travis",
    )


def appveyor_transport(client: httpx.AsyncClient, token: str, base_url: str = "https://ci.appveyor.com/api") -> ProviderTransport:
    """Transport speaking the AppVeyor REST API."""
    return ProviderTransport(
        client,
        base_url,
        authorization=f"Bearer {token}",
        accept="application/json",
        name="appveyor",
    )
