from dataclasses import dataclass, field
from typing import Optional

from fastapi import Request
from supabase import AsyncClient, create_async_client

from smartfix.core.config import Settings, settings as default_settings
from smartfix.core.logger import logger
from smartfix.services.auth_service import AuthService, SessionState
from smartfix.services.booking_service import BookingSynchronizer
from smartfix.services.catalog_service import ServiceCatalog
from smartfix.services.local_cache import (
    FileKeyValueStore,
    KeyValueStore,
    LocalBookingCache,
    MemoryKeyValueStore,
)
from smartfix.services.remote_store import SupabaseBookingStore


@dataclass
class Container:
    """Everything an operation needs, built once per process and passed down explicitly."""
    settings: Settings
    client: Optional[AsyncClient]
    store: KeyValueStore
    auth: AuthService
    catalog: ServiceCatalog
    bookings: BookingSynchronizer
    session: SessionState = field(default_factory=SessionState)


async def create_supabase_client(settings: Settings) -> Optional[AsyncClient]:
    if not (settings.SUPABASE_URL and settings.SUPABASE_KEY):
        logger.warning("⚠️ Supabase credentials missing")
        return None
    try:
        client = await create_async_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        logger.info("✅ Supabase Async client initialized")
        return client
    except Exception as e:
        logger.error(f"❌ Failed to initialize Supabase Async: {e}")
        return None


def build_store(settings: Settings) -> KeyValueStore:
    if settings.CACHE_DIR:
        return FileKeyValueStore(settings.CACHE_DIR)
    logger.info("ℹ️ CACHE_DIR empty, bookings cache is in-memory only")
    return MemoryKeyValueStore()


def build_container(settings: Settings, client: Optional[AsyncClient], store: Optional[KeyValueStore] = None) -> Container:
    store = store if store is not None else build_store(settings)
    return Container(
        settings=settings,
        client=client,
        store=store,
        auth=AuthService(client),
        catalog=ServiceCatalog(client, settings.SERVICES_TABLE),
        bookings=BookingSynchronizer(
            SupabaseBookingStore(client, settings.BOOKINGS_TABLE),
            LocalBookingCache(store),
        ),
    )


async def start_container(settings: Settings = None) -> Container:
    """Builds the container and brings the session up: restore, then subscribe."""
    settings = settings or default_settings
    client = await create_supabase_client(settings)
    container = build_container(settings, client)
    if client:
        await container.session.restore(container.auth)
        container.session.subscribe(container.auth)
    return container


def get_container(request: Request) -> Container:
    return request.app.state.container
