"""Price alert CRUD endpoints for alert owners."""

from fastapi import APIRouter, Depends, Request

from ...config.logging import get_logger, log_audit_event
from ...ormdb.repositories import DeleteResult, PriceAlertRepository
from ..dependencies import get_alert_repository, get_owner_id
from ..exceptions import ForbiddenError, NotFoundError
from ..models.requests import AlertCreateRequest
from ..models.responses import (
    AlertData,
    AlertListResponse,
    AlertResponse,
    StatusResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/alerts")


@router.get(
    "",
    response_model=AlertListResponse,
    summary="List Own Alerts",
    description="List the caller's active price alerts, newest first",
)
def list_alerts(
    request: Request,
    owner_id: str = Depends(get_owner_id),
    repo: PriceAlertRepository = Depends(get_alert_repository),
):
    request_id = getattr(request.state, "request_id", None)
    alerts = repo.list_by_owner(owner_id)

    logger.info(
        "Alerts listed", owner_id=owner_id, count=len(alerts), request_id=request_id
    )

    return AlertListResponse(
        data=[AlertData.from_alert(alert) for alert in alerts],
        request_id=request_id,
    )


@router.post(
    "",
    response_model=AlertResponse,
    status_code=201,
    summary="Create Alert",
    description="Create a single-shot price alert for the caller",
)
def create_alert(
    alert_request: AlertCreateRequest,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    repo: PriceAlertRepository = Depends(get_alert_repository),
):
    """
    Create a price alert.

    - **symbol** (or **ticker**): instrument to watch
    - **threshold**: price boundary
    - **condition**: `above` or `below`
    """
    request_id = getattr(request.state, "request_id", None)

    alert = repo.insert(
        owner_id=owner_id,
        symbol=alert_request.symbol,
        threshold=alert_request.threshold,
        condition=alert_request.condition,
    )

    log_audit_event(
        "alert_created",
        user_id=owner_id,
        alert_id=alert.id,
        symbol=alert.symbol,
        condition=alert.condition.value,
        threshold=alert.threshold,
    )

    return AlertResponse(
        data=AlertData.from_alert(alert),
        message="Alert created",
        request_id=request_id,
    )


@router.delete(
    "/{alert_id}",
    response_model=StatusResponse,
    summary="Delete Own Alert",
    description="Delete one of the caller's alerts",
)
def delete_alert(
    alert_id: str,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    repo: PriceAlertRepository = Depends(get_alert_repository),
):
    request_id = getattr(request.state, "request_id", None)

    alert = repo.get_by_id(alert_id)
    if alert is None:
        raise NotFoundError("Alert", alert_id)
    if alert.owner_id != owner_id:
        raise ForbiddenError("alert", alert_id)

    # A monitoring run may have retired it in the meantime
    if repo.delete_by_id(alert_id) is DeleteResult.NOT_FOUND:
        raise NotFoundError("Alert", alert_id)

    log_audit_event("alert_deleted", user_id=owner_id, alert_id=alert_id)

    return StatusResponse.create(
        data={"id": alert_id, "deleted": True},
        message="Alert deleted",
        request_id=request_id,
    )
