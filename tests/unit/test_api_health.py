import pytest
from httpx import AsyncClient
from rateplate.core.config import get_settings


@pytest.mark.asyncio
async def test_health_endpoint_returns_service_metadata(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["service"] == get_settings().app_name
    assert payload["status"] == "ok"
    assert payload["datastores"]["database"] == {"status": "ok"}


@pytest.mark.asyncio
async def test_responses_echo_request_id(async_client: AsyncClient) -> None:
    response = await async_client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.headers["x-request-id"] == "req-42"


class RecordingLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    async def adebug(self, event: str, **fields) -> None:
        self.events.append((event, fields))


@pytest.mark.asyncio
async def test_health_logs_status_fields_only(
    async_client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    recorder = RecordingLogger()
    monkeypatch.setattr("rateplate.api.routes.health.logger", recorder)

    await async_client.get("/health")

    assert recorder.events == [("health_probe", {"status": "ok", "database": "ok"})]
