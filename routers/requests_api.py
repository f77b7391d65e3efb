from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import crud
import workflow
from dependencies import get_db, require_employee, require_hr
from filter_helpers import blank_to_none, normalize_status
from models import AssetRequest, AssetRequestIn, Identity

router = APIRouter()

OUTCOME_STATUS = {
    "not_found": 404,
    "invalid_state": 400,
    "invalid_asset_type": 400,
    "insufficient_inventory": 409,
    "conflict": 409,
    "storage_unavailable": 503,
}


def unwrap(result: workflow.WorkflowResult) -> AssetRequest:
    if not result.ok:
        raise HTTPException(status_code=OUTCOME_STATUS[result.outcome], detail=result.message)
    if result.request is None:
        raise HTTPException(status_code=500, detail="missing request")
    return result.request


# ---------- employee ----------
@router.post("/employee/requests", response_model=AssetRequest, status_code=201)
def create_request_api(
    body: AssetRequestIn,
    db: Session = Depends(get_db),
    user: Identity = Depends(require_employee),
):
    return unwrap(workflow.submit_request(db, body.asset_id, user, body.note))


@router.get("/employee/requests", response_model=list[AssetRequest])
def my_requests_api(
    db: Session = Depends(get_db),
    user: Identity = Depends(require_employee),
):
    return crud.list_requests_by_requester(db, user.email)


@router.patch("/employee/requests/{request_id}/return", response_model=AssetRequest)
def return_request_api(
    request_id: str,
    db: Session = Depends(get_db),
    user: Identity = Depends(require_employee),
):
    req = crud.get_request(db, request_id)
    if req is not None and req.requester_email != user.email:
        raise HTTPException(status_code=403, detail="not your request")
    return unwrap(workflow.return_request(db, request_id))


# ---------- hr ----------
@router.get("/hr/requests", response_model=list[AssetRequest])
def all_requests_api(
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    status = normalize_status(blank_to_none(status))
    return crud.list_requests(db, hr_email=hr.email, status=status)


@router.get("/hr/requests/company/{company_name}", response_model=list[AssetRequest])
def company_requests_api(
    company_name: str,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    status = normalize_status(blank_to_none(status))
    return crud.list_requests_by_company(db, company_name, status, hr_email=hr.email)


@router.patch("/hr/requests/{request_id}/approve", response_model=AssetRequest)
def approve_request_api(
    request_id: str,
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    return unwrap(workflow.approve_request(db, request_id, hr))


@router.patch("/hr/requests/{request_id}/reject", response_model=AssetRequest)
def reject_request_api(
    request_id: str,
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    return unwrap(workflow.reject_request(db, request_id, hr))
