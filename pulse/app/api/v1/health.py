r"""pulse\app\api\v1\health.py

Liveness endpoint.

Orchestrators and load balancers call ``GET /api/v1`` to verify that the
service process is up.  The payload only says the process answers; it
carries no dependency health.
"""

from fastapi import APIRouter, Depends, Request

from ...models import schemas
from ...services.status_service import StatusReporter

router = APIRouter()

HEALTH_PATH = "/api/v1"


def get_status_reporter(request: Request) -> StatusReporter:
    return request.app.state.status_reporter


@router.get(HEALTH_PATH, response_model=schemas.HealthStatus)
async def health_check(
    reporter: StatusReporter = Depends(get_status_reporter),
) -> schemas.HealthStatus:
    """Return the liveness payload."""
    return reporter.get_health()
