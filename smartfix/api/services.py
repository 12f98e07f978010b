from fastapi import APIRouter, Depends

from smartfix.services.container import Container, get_container

router = APIRouter()


@router.get("/services")
async def list_services(container: Container = Depends(get_container)):
    result = await container.catalog.fetch_services()
    return {
        "services": [service.model_dump() for service in result.services],
        "fallback": result.is_fallback,
    }
