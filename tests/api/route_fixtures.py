from __future__ import annotations

from types import SimpleNamespace

from httpx import ASGITransport, AsyncClient

from tourney.main import app

GATEWAY_TOKEN = "gateway-secret"


def gateway_settings(*, allowlist: str = "127.0.0.1/32") -> SimpleNamespace:
    return SimpleNamespace(
        gateway_api_token=GATEWAY_TOKEN,
        gateway_api_allowlist=allowlist,
        gateway_trusted_proxies="",
    )


def identity_headers(*, user_id: int | None = 7, role: str | None = "user") -> dict[str, str]:
    headers = {"X-Gateway-Token": GATEWAY_TOKEN}
    if user_id is not None:
        headers["X-User-Id"] = str(user_id)
    if role is not None:
        headers["X-User-Role"] = role
    return headers


class _FakeTransaction:
    def __init__(self, session: object) -> None:
        self._session = session

    async def __aenter__(self) -> object:
        return self._session

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class FakeSessionLocal:
    def __init__(self) -> None:
        self.session = SimpleNamespace(name="fake-session")
        self.transactions = 0

    def begin(self) -> _FakeTransaction:
        self.transactions += 1
        return _FakeTransaction(self.session)


def api_client() -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app, client=("127.0.0.1", 8080)),
        base_url="http://testserver",
    )
