"""Health and job management endpoints."""

from fastapi import APIRouter, Request

from ...config.logging import get_logger
from ...ormdb.database import check_database_health
from ...scheduler import (
    ALERT_MONITORING_JOB_ID,
    get_global_scheduler,
    trigger_alert_monitoring_now,
)
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    response_model=StatusResponse,
    summary="Health Check",
    description="Database connectivity and scheduler state",
)
def health_check(request: Request):
    request_id = getattr(request.state, "request_id", None)

    database = check_database_health()

    scheduler = get_global_scheduler()
    next_run = None
    if scheduler.running:
        job = scheduler.get_job(ALERT_MONITORING_JOB_ID)
        if job is not None and job.next_run_time is not None:
            next_run = job.next_run_time.isoformat()

    status = "healthy" if database["status"] == "healthy" else "unhealthy"

    return StatusResponse.create(
        data={
            "status": status,
            "database": database,
            "scheduler": {"running": scheduler.running, "next_alert_check": next_run},
        },
        request_id=request_id,
    )


@router.post(
    "/jobs/alert-monitoring/run",
    response_model=StatusResponse,
    status_code=202,
    summary="Run Alert Monitoring Now",
    description="Schedule an immediate alert monitoring run",
)
def run_alert_monitoring(request: Request):
    request_id = getattr(request.state, "request_id", None)

    job_id = trigger_alert_monitoring_now()
    logger.info("Manual alert monitoring run requested", job_id=job_id)

    return StatusResponse.create(
        data={"job_id": job_id},
        message="Alert monitoring run scheduled",
        request_id=request_id,
    )
