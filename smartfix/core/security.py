from fastapi import Depends

from smartfix.core.errors import NotAuthenticatedError
from smartfix.services.container import Container, get_container


async def require_user_id(container: Container = Depends(get_container)) -> str:
    """
    Resolve the signed-in user from the process-wide session.
    The id is handed to the booking operations explicitly.
    """
    user_id = container.session.user_id
    if not user_id:
        raise NotAuthenticatedError()
    return user_id
