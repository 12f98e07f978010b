from typing import List, Optional

from supabase import AsyncClient

from smartfix.core.config import settings
from smartfix.core.errors import Recovered
from smartfix.core.logger import logger
from smartfix.models.catalog import CatalogResult, Service

FALLBACK_SERVICES = (
    Service(id="1", name="AC Repair", description="Air conditioning repair and maintenance"),
    Service(id="2", name="Plumbing", description="Plumbing services and repairs"),
    Service(id="3", name="Electrical", description="Electrical work and repairs"),
    Service(id="4", name="Cleaning", description="House and office cleaning services"),
    Service(id="5", name="Painting", description="Interior and exterior painting"),
)


def fallback_services() -> List[Service]:
    return [service.model_copy() for service in FALLBACK_SERVICES]


class ServiceCatalog:
    """Services offered for booking. Never returns an empty list because the backend is down."""

    def __init__(self, client: Optional[AsyncClient], table: str = None):
        self.client = client
        self.table = table or settings.SERVICES_TABLE

    async def fetch_services(self) -> CatalogResult:
        if not self.client:
            logger.warning("⚠️ Supabase client missing, serving fallback catalog")
            return CatalogResult(
                services=fallback_services(),
                recovered=Recovered(source="catalog", detail="backend not configured"),
            )

        try:
            response = await self.client.table(self.table).select("*").order("name").execute()
            services = [Service.model_validate(row) for row in response.data or []]
            logger.info(f"📋 Loaded {len(services)} services")
            return CatalogResult(services=services)
        except Exception as e:
            logger.warning(f"⚠️ Catalog unavailable, serving fallback: {e}")
            return CatalogResult(
                services=fallback_services(),
                recovered=Recovered(source="catalog", detail=str(e)),
            )

    async def list_services(self) -> List[Service]:
        result = await self.fetch_services()
        return result.services
