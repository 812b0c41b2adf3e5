from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from aawaaj_admin.core.config import get_settings
from aawaaj_admin.dashboard.api import router as dashboard_router
from aawaaj_admin.identity.api import router as identity_router
from aawaaj_admin.metrics import generate_metrics_payload, metrics_content_type
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.dependencies import require_admin_api
from aawaaj_admin.security.roles import TOP_SCOPE_ROLE
from aawaaj_admin.submissions.api import router as submissions_router
from aawaaj_admin.users.api import router as users_router

router = APIRouter()
router.include_router(identity_router)
router.include_router(dashboard_router)
router.include_router(users_router)
router.include_router(submissions_router)


def _metrics_enabled() -> None:
    if not get_settings().metrics_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")


@router.get("/health", tags=["system"])
def health() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.app_name,
        "environment": settings.app_env,
    }


@router.get("/metrics", tags=["system"], dependencies=[Depends(_metrics_enabled)])
def metrics(_actor: Profile = Depends(require_admin_api(TOP_SCOPE_ROLE))) -> Response:
    return Response(content=generate_metrics_payload(), media_type=metrics_content_type())
