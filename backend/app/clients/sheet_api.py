from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class SheetApiError(Exception):
    message: str
    status_code: int | None = None
    body: str | None = None

    def __str__(self) -> str:
        return self.message


class SheetApiClient:
    """Client for the spreadsheet macro endpoint.

    The endpoint is a single URL that dispatches on an ``action`` value:
    reads pass it as a query parameter, writes carry it in the JSON body.
    The macro host answers with a redirect, so redirects are followed.
    """

    def __init__(
        self,
        *,
        url: str,
        timeout: float = 10.0,
        retries: int = 2,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = url
        self._retries = retries
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, **kwargs: Any) -> httpx.Response:
        last_error: Exception | None = None
        for attempt in range(self._retries + 1):
            try:
                response = await self._client.request(method, self._url, **kwargs)
            except httpx.RequestError as exc:
                last_error = exc
            else:
                if response.status_code >= 500:
                    last_error = SheetApiError(
                        f"Sheet API error {response.status_code}",
                        status_code=response.status_code,
                        body=response.text,
                    )
                else:
                    return response
            if attempt < self._retries:
                continue
        raise SheetApiError("Sheet API request failed") from last_error

    async def get_action(self, action: str, **params: Any) -> dict[str, Any]:
        response = await self._request("GET", params={"action": action, **params})
        if not response.is_success:
            raise SheetApiError(
                f"Sheet API error {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise SheetApiError(
                "Sheet API returned a non-JSON response",
                status_code=response.status_code,
                body=response.text,
            ) from exc
        if not isinstance(payload, dict):
            raise SheetApiError(
                "Sheet API returned an unexpected payload",
                status_code=response.status_code,
                body=response.text,
            )
        return payload

    async def get_initial_data(self) -> dict[str, Any]:
        return await self.get_action("getInitialData")

    async def post_action(self, action: str, payload: dict[str, Any]) -> dict[str, Any]:
        # Writes are attempted exactly once.
        body = {**payload, "action": action}
        try:
            response = await self._client.post(self._url, json=body)
        except httpx.RequestError as exc:
            raise SheetApiError("Sheet API request failed") from exc
        if not response.is_success:
            raise SheetApiError(
                f"Sheet API error {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        if not response.text:
            return {}
        try:
            result = response.json()
        except ValueError:
            return {}
        if not isinstance(result, dict):
            return {}
        if result.get("status") == "error":
            raise SheetApiError(
                f"Sheet API rejected {action}: {result.get('message', 'unknown error')}",
                status_code=response.status_code,
                body=response.text,
            )
        return result

    async def submit_evaluation(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self.post_action("submitEvaluation", payload)
