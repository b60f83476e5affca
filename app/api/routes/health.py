"""Health check: database connectivity and whether the seed roles exist."""

from fastapi import APIRouter

from app.api.deps import SettingsDep, StoreDep
from app.core.database import check_db_connected
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(store: StoreDep, settings: SettingsDep) -> HealthResponse:
    """
    Report database connectivity and seed state. Used by load balancers and
    monitoring; `seeded` is false until the bootstrap and default roles exist,
    in which case registration fails with a configuration error.
    """
    if not check_db_connected(store.session):
        return HealthResponse(environment=settings.APP_ENV, database="disconnected")
    seeded = all(
        store.find_role_by_name(name) is not None
        for name in (settings.BOOTSTRAP_ROLE_NAME, settings.DEFAULT_ROLE_NAME)
    )
    return HealthResponse(environment=settings.APP_ENV, database="connected", seeded=seeded)
