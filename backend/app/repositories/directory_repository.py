from __future__ import annotations

import time

from app.clients.sheet_api import SheetApiClient, SheetApiError
from app.models.directory import DirectoryData
from app.services.normalization import normalize_initial_data
from app.telemetry.otel import start_span
from app.telemetry.tracing import emit_metric


class DirectoryUnavailableError(Exception):
    pass


class DirectoryRepository:
    def __init__(self, client: SheetApiClient) -> None:
        self._client = client

    async def load(self) -> DirectoryData:
        started = time.monotonic()
        with start_span("directory.load", {"action": "getInitialData"}):
            try:
                payload = await self._client.get_initial_data()
            except SheetApiError as exc:
                raise DirectoryUnavailableError(
                    "Unable to reach the evaluation data source, please try again"
                ) from exc
        if payload.get("status") != "success":
            raise DirectoryUnavailableError("Data format error from server")
        data = normalize_initial_data(payload)
        emit_metric(
            "directory.load_latency",
            round(time.monotonic() - started, 3),
            attributes={
                "users": len(data.users),
                "candidates": len(data.candidates),
                "questions": len(data.questions),
            },
        )
        return data
