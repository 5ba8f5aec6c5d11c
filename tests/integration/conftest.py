import json

import httpx
import pytest
import pytest_asyncio

from config import ApplicationConfig
from src.adapter.services.homeowner_adapter import HomeownerAdapter
from src.adapter.services.http_transport import HttpxAuthTransport
from src.adapter.services.renter_investor_adapter import RenterInvestorAdapter
from src.adapter.services.token_store import InMemoryTokenStore
from src.depends import build_orchestrator
from src.domain.entities import Tenant
from tests.fixtures.json_loader import TestDataLoader

HOMEOWNER_URL = "http://homeowner.test/api"
RENTER_URL = "http://renter.test/api"


class IntegrationConfig(ApplicationConfig):
    HOMEOWNER_API_BASE_URL = HOMEOWNER_URL
    RENTER_INVESTOR_API_BASE_URL = RENTER_URL
    LOGIN_OTP_EXPIRY_SECONDS = 60
    REGISTRATION_OTP_EXPIRY_SECONDS = 120
    FORGOT_PASSWORD_OTP_EXPIRY_SECONDS = 60
    OTP_RESEND_COOLDOWN_SECONDS = 60


class FakeBackend:
    """Canned JSON replies keyed by path, recording every request"""

    def __init__(self):
        self.replies = {}
        self.requests = []

    def reply(self, endpoint: str, body: dict, status_code: int = 200) -> None:
        self.replies[endpoint] = (status_code, body)

    def fail_with(self, endpoint: str, exc_type=httpx.ConnectError) -> None:
        self.replies[endpoint] = exc_type

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path[len("/api"):]
        reply = self.replies.get(endpoint)
        if reply is None:
            return httpx.Response(404, json={"success": False, "message": "Route not found"})
        if isinstance(reply, type):
            raise reply("connection refused", request=request)
        status_code, body = reply
        return httpx.Response(status_code, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> dict:
        return json.loads(self.last_request.content)

    @property
    def paths(self) -> list:
        return [request.url.path for request in self.requests]


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest.fixture
def homeowner_backend():
    return FakeBackend()


@pytest.fixture
def renter_backend():
    return FakeBackend()


@pytest.fixture
def token_store():
    return InMemoryTokenStore()


@pytest_asyncio.fixture
async def homeowner(homeowner_backend, token_store):
    transport = HttpxAuthTransport(
        HOMEOWNER_URL, token_store=token_store, transport=homeowner_backend.transport()
    )
    yield HomeownerAdapter(transport)
    await transport.aclose()


@pytest_asyncio.fixture
async def renter(renter_backend, token_store):
    transport = HttpxAuthTransport(
        RENTER_URL, token_store=token_store, transport=renter_backend.transport()
    )
    yield RenterInvestorAdapter(transport)
    await transport.aclose()


@pytest_asyncio.fixture
async def orchestrator(homeowner_backend, renter_backend, token_store):
    orchestrator = build_orchestrator(
        IntegrationConfig,
        token_store=token_store,
        transports={
            Tenant.homeowner: homeowner_backend.transport(),
            Tenant.renter_investor: renter_backend.transport(),
        },
    )
    yield orchestrator
    await orchestrator.aclose()
