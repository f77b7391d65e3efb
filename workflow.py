"""
Request approval workflow.

    pending  -> approved | rejected
    approved -> returned            (Returnable assets only)

rejected, returned and a Non-returnable approved are terminal.

Approval and return each touch two rows (asset counter + request status)
without a shared transaction. Every step is a single conditional UPDATE
committed on its own; when the second step loses, the first one is undone
with a compensating UPDATE. The compensation is attempted once and, if it
fails, the call reports storage_unavailable. Rows are read back only after
both UPDATEs have landed, so a failed read never skips a compensation.

Requests are only visible to the approver that owns them; any other
approver gets not_found.

Functions here never raise for domain outcomes; callers get a
WorkflowResult and map `outcome` to their own error surface.
"""
from __future__ import annotations

import functools
import logging
from typing import Literal, Optional

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import crud
from models import Asset, AssetRequest, Identity

logger = logging.getLogger("app.workflow")

Outcome = Literal[
    "ok",
    "not_found",
    "invalid_state",
    "insufficient_inventory",
    "invalid_asset_type",
    "conflict",
    "storage_unavailable",
]

RETURNABLE = "Returnable"


class WorkflowResult(BaseModel):
    outcome: Outcome
    request: Optional[AssetRequest] = None
    asset: Optional[Asset] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome == "ok"


def _fail(outcome: Outcome, message: str, request: Optional[AssetRequest] = None) -> WorkflowResult:
    return WorkflowResult(outcome=outcome, request=request, message=message)


def _storage_guard(fn):
    @functools.wraps(fn)
    def wrapper(db: Session, *args, **kwargs) -> WorkflowResult:
        try:
            return fn(db, *args, **kwargs)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("storage_error op=%s", fn.__name__)
            return _fail("storage_unavailable", "storage unavailable")
    return wrapper


def _release_unit(db: Session, asset_id: str, request_id: str) -> bool:
    """Compensating +1 for a decrement whose status update did not land."""
    try:
        released = crud.adjust_available(db, asset_id, +1)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "compensation_failed request_id=%s asset_id=%s", request_id, asset_id
        )
        return False
    if released:
        logger.info("compensated request_id=%s asset_id=%s", request_id, asset_id)
    else:
        # asset deleted in between, nothing left to give back to
        logger.warning("compensation_skipped request_id=%s asset_id=%s", request_id, asset_id)
    return True


def _load_owned(db: Session, request_id: str, approver: Identity) -> Optional[AssetRequest]:
    req = crud.get_request(db, request_id)
    if req is None or req.hr_email != approver.email:
        return None
    return req


@_storage_guard
def submit_request(
    db: Session,
    asset_id: str,
    requester: Identity,
    note: Optional[str] = None,
) -> WorkflowResult:
    # inventory is consumed on approval only, so many pending requests may
    # target the last unit
    asset = crud.get_asset(db, asset_id)
    if asset is None:
        return _fail("not_found", "asset not found")

    user = crud.get_user_by_email(db, requester.email)
    req = crud.create_request(
        db,
        asset=asset,
        requester_email=requester.email,
        requester_name=user.name if user else None,
        note=note,
    )
    logger.info(
        "request_submitted request_id=%s asset_id=%s requester=%s",
        req.id,
        asset.id,
        requester.email,
    )
    return WorkflowResult(outcome="ok", request=req, asset=asset)


@_storage_guard
def approve_request(db: Session, request_id: str, approver: Identity) -> WorkflowResult:
    req = _load_owned(db, request_id, approver)
    if req is None:
        return _fail("not_found", "request not found")
    if req.status != "pending":
        return _fail("invalid_state", "request already processed", req)

    if not crud.adjust_available(db, req.asset_id, -1):
        if crud.get_asset(db, req.asset_id) is None:
            return _fail("not_found", "asset not found", req)
        current = crud.get_request(db, request_id)
        if current is not None and current.status != "pending":
            # a concurrent approval took the last unit for this same request
            return _fail("invalid_state", "request already processed", current)
        logger.info(
            "approve_refused request_id=%s asset_id=%s reason=insufficient_inventory",
            request_id,
            req.asset_id,
        )
        return _fail("insufficient_inventory", "no units available", req)

    # the decrement is committed: nothing may return before the status lands
    # or the unit is released
    try:
        approved = crud.set_request_status(
            db,
            request_id,
            expected="pending",
            new="approved",
            fields={"approval_date": crud.utcnow(), "processed_by": approver.email},
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("approve_status_failed request_id=%s", request_id)
        if not _release_unit(db, req.asset_id, request_id):
            return _fail("storage_unavailable", "inventory rollback failed", req)
        return _fail("storage_unavailable", "storage unavailable", req)

    if not approved:
        logger.warning("approve_conflict request_id=%s approver=%s", request_id, approver.email)
        if not _release_unit(db, req.asset_id, request_id):
            return _fail("storage_unavailable", "inventory rollback failed", req)
        return _fail("conflict", "request was processed concurrently", crud.get_request(db, request_id))

    logger.info(
        "request_approved request_id=%s asset_id=%s approver=%s",
        request_id,
        req.asset_id,
        approver.email,
    )
    return WorkflowResult(
        outcome="ok",
        request=crud.get_request(db, request_id),
        asset=crud.get_asset(db, req.asset_id),
    )


@_storage_guard
def reject_request(db: Session, request_id: str, approver: Identity) -> WorkflowResult:
    req = _load_owned(db, request_id, approver)
    if req is None:
        return _fail("not_found", "request not found")
    if req.status != "pending":
        return _fail("invalid_state", "request already processed", req)

    rejected = crud.set_request_status(
        db,
        request_id,
        expected="pending",
        new="rejected",
        fields={"approval_date": crud.utcnow(), "processed_by": approver.email},
    )
    if not rejected:
        return _fail("conflict", "request was processed concurrently", crud.get_request(db, request_id))

    logger.info("request_rejected request_id=%s approver=%s", request_id, approver.email)
    return WorkflowResult(outcome="ok", request=crud.get_request(db, request_id))


@_storage_guard
def return_request(db: Session, request_id: str) -> WorkflowResult:
    req = crud.get_request(db, request_id)
    if req is None:
        return _fail("not_found", "request not found")
    if req.status != "approved":
        return _fail("invalid_state", "only approved requests can be returned", req)
    if req.asset_type != RETURNABLE:
        return _fail("invalid_asset_type", "only returnable assets can be returned", req)

    returned = crud.set_request_status(
        db,
        request_id,
        expected="approved",
        new="returned",
        fields={"return_date": crud.utcnow()},
    )
    if not returned:
        return _fail("conflict", "request was processed concurrently", crud.get_request(db, request_id))

    try:
        released = crud.adjust_available(db, req.asset_id, +1)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("return_increment_failed request_id=%s asset_id=%s", request_id, req.asset_id)
        try:
            crud.set_request_status(
                db,
                request_id,
                expected="returned",
                new="approved",
                fields={"return_date": None},
            )
        except SQLAlchemyError:
            db.rollback()
            logger.exception("compensation_failed request_id=%s status=returned", request_id)
            return _fail("storage_unavailable", "request rollback failed", req)
        return _fail("storage_unavailable", "storage unavailable", req)

    if released:
        logger.info("request_returned request_id=%s asset_id=%s", request_id, req.asset_id)
    else:
        logger.warning(
            "return_increment_skipped request_id=%s asset_id=%s", request_id, req.asset_id
        )
    return WorkflowResult(
        outcome="ok",
        request=crud.get_request(db, request_id),
        asset=crud.get_asset(db, req.asset_id),
    )
