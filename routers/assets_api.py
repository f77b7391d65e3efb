import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import crud
from dependencies import get_db, require_hr
from filter_helpers import blank_to_none, normalize_asset_type, normalize_order
from models import Asset, AssetIn, AssetUpdate, Identity

logger = logging.getLogger("app.assets")

router = APIRouter()


@router.post("/hr/assets", response_model=Asset, status_code=201)
def create_asset_api(
    body: AssetIn,
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    profile = crud.get_user_by_email(db, hr.email)
    company_name = (profile.company_name if profile else None) or ""
    asset = crud.create_asset(db, body, hr_email=hr.email, company_name=company_name)
    logger.info("asset_created asset_id=%s hr=%s quantity=%s", asset.id, hr.email, asset.total_quantity)
    return asset


@router.get("/hr/assets", response_model=list[Asset])
def list_assets_api(
    asset_type: Optional[str] = None,
    order: str = "desc",
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    asset_type = normalize_asset_type(blank_to_none(asset_type))
    order = normalize_order(order)
    return crud.list_assets(db, hr_email=hr.email, asset_type=asset_type, order=order)


def _owned_asset(db: Session, asset_id: str, hr: Identity) -> Asset:
    asset = crud.get_asset(db, asset_id)
    # another company's asset looks the same as a missing one
    if not asset or asset.hr_email != hr.email:
        raise HTTPException(status_code=404, detail="asset not found")
    return asset


@router.get("/hr/assets/{asset_id}", response_model=Asset)
def get_asset_api(
    asset_id: str,
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    return _owned_asset(db, asset_id, hr)


@router.patch("/hr/assets/{asset_id}", response_model=Asset)
def update_asset_api(
    asset_id: str,
    body: AssetUpdate,
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    asset = _owned_asset(db, asset_id, hr)

    if body.total_quantity is not None and body.total_quantity != asset.total_quantity:
        if not crud.resize_asset(db, asset_id, body.total_quantity):
            if not crud.get_asset(db, asset_id):
                raise HTTPException(status_code=404, detail="asset not found")
            raise HTTPException(status_code=409, detail="total_quantity below units in use")

    updated = crud.update_asset(db, asset_id, body)
    if not updated:
        raise HTTPException(status_code=404, detail="asset not found")
    return updated


@router.delete("/hr/assets/{asset_id}", status_code=204)
def delete_asset_api(
    asset_id: str,
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    _owned_asset(db, asset_id, hr)
    # requests keep their snapshot of the asset
    ok = crud.delete_asset(db, asset_id)
    if not ok:
        raise HTTPException(status_code=404, detail="asset not found")
    logger.info("asset_deleted asset_id=%s hr=%s", asset_id, hr.email)
    return None
