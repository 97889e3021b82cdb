r"""pulse\app\models\schemas.py

Pydantic models used throughout the API.

The health payload keeps the short wire names existing probes and
dashboards already parse (``timestamp`` and ``uptime``).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    """Liveness payload returned by ``GET /api/v1``."""

    success: bool = Field(..., description="Always true while the process answers")
    message: str = Field(..., description="Human readable status line")
    timestamp: int = Field(..., description="Wall clock time in epoch milliseconds")
    uptime: float = Field(..., ge=0.0, description="Seconds since the process started")
