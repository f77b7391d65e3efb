from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import billing
from dependencies import get_db, require_hr
from models import Identity, Package, UpgradeIn, UpgradeOut

router = APIRouter()


@router.get("/packages", response_model=list[Package])
def list_packages_api(db: Session = Depends(get_db)):
    return billing.list_packages(db)


@router.get("/packages/{name}", response_model=Package)
def get_package_api(name: str, db: Session = Depends(get_db)):
    pkg = billing.get_package(db, name)
    if not pkg:
        raise HTTPException(status_code=404, detail="package not found")
    return pkg


@router.post("/hr/upgrade", response_model=UpgradeOut)
def upgrade_api(
    body: UpgradeIn,
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    if not billing.get_package(db, body.package_name):
        raise HTTPException(status_code=404, detail="package not found")
    pkg = billing.upgrade(db, hr.email, body.package_name)
    if not pkg:
        raise HTTPException(status_code=404, detail="hr user not found")
    return UpgradeOut(package=pkg.name, employee_limit=pkg.employee_limit, price=pkg.price)
