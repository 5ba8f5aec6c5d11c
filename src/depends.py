import logging
from typing import Mapping, Optional

import httpx

from config import ApplicationConfig
from src.adapter.services.homeowner_adapter import HomeownerAdapter
from src.adapter.services.http_transport import HttpxAuthTransport
from src.adapter.services.renter_investor_adapter import RenterInvestorAdapter
from src.adapter.services.token_store import InMemoryTokenStore
from src.app.services.token_store import ITokenStore
from src.app.use_cases.auth import SessionOrchestrator, default_otp_policies
from src.domain.entities import Tenant

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(config=ApplicationConfig) -> None:
    level = config.LOG_LEVEL.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("src").setLevel(level)


def build_orchestrator(
    config=ApplicationConfig,
    token_store: Optional[ITokenStore] = None,
    transports: Optional[Mapping[Tenant, httpx.AsyncBaseTransport]] = None,
) -> SessionOrchestrator:
    """
    Wire both tenant adapters to one shared token store.

    Args:
        config: settings holder, ApplicationConfig by default
        token_store: defaults to an in-memory store
        transports: optional httpx transports per tenant (tests pass
            httpx.MockTransport here)
    """
    token_store = token_store or InMemoryTokenStore()
    transports = transports or {}
    base_urls = {
        Tenant.homeowner: config.HOMEOWNER_API_BASE_URL,
        Tenant.renter_investor: config.RENTER_INVESTOR_API_BASE_URL,
    }
    adapter_classes = {
        Tenant.homeowner: HomeownerAdapter,
        Tenant.renter_investor: RenterInvestorAdapter,
    }
    adapters = {}
    for tenant, adapter_class in adapter_classes.items():
        http = HttpxAuthTransport(
            base_urls[tenant],
            token_store=token_store,
            timeout=config.HTTP_TIMEOUT_SECONDS,
            transport=transports.get(tenant),
        )
        adapters[tenant] = adapter_class(http)
    return SessionOrchestrator(
        adapters, token_store, otp_policies=default_otp_policies(config)
    )
