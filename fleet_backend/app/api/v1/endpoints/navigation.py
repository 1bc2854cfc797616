"""
Navigation API endpoints.

Returns the menu entries the signed-in role may open.
"""

from fastapi import APIRouter, Depends

from fleet_backend.app.core.dependencies import CurrentSession, get_current_session
from fleet_backend.app.core.guards import dashboard_info, navigation_for
from fleet_backend.app.schemas.navigation import NavigationResponse

router = APIRouter(prefix="/navigation", tags=["Navigation"])


@router.get("", response_model=NavigationResponse)
async def get_navigation(session: CurrentSession = Depends(get_current_session)):
    return NavigationResponse(
        role=session.role,
        items=navigation_for(session),
        dashboard=dashboard_info(session),
    )
