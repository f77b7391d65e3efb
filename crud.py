from __future__ import annotations

from datetime import datetime, timezone

from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import select, delete, update
from sqlalchemy.orm import Session

from models import Asset, AssetIn, AssetRequest, AssetUpdate, ProfileSummary, User
from orm import AssetORM, AssetRequestORM, UserORM

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def persist(db: Session, *, commit: bool) -> None:
    if commit:
        db.commit()
    else:
        db.flush()

def _asset_to_schema(a: AssetORM) -> Asset:
    return Asset(
        id=a.id,
        name=a.name,
        image=a.image,
        asset_type=a.asset_type,  # type: ignore
        total_quantity=a.total_quantity,
        available_quantity=a.available_quantity,
        company_name=a.company_name,
        hr_email=a.hr_email,
        created_at=a.created_at,
    )

def _request_to_schema(r: AssetRequestORM) -> AssetRequest:
    return AssetRequest(
        id=r.id,
        asset_id=r.asset_id,
        asset_name=r.asset_name,
        asset_type=r.asset_type,  # type: ignore
        asset_image=r.asset_image,
        company_name=r.company_name,
        hr_email=r.hr_email,
        requester_name=r.requester_name,
        requester_email=r.requester_email,
        note=r.note,
        status=r.status,  # type: ignore
        request_date=r.request_date,
        approval_date=r.approval_date,
        return_date=r.return_date,
        processed_by=r.processed_by,
    )

def _user_to_schema(u: UserORM) -> User:
    return User(
        id=u.id,
        name=u.name,
        email=u.email,
        role=u.role,  # type: ignore
        profile_image=u.profile_image,
        date_of_birth=u.date_of_birth,
        position=u.position,
        company_name=u.company_name,
        company_logo=u.company_logo,
        subscription=u.subscription,
        package_limit=u.package_limit,
    )

def _user_to_profile(u: UserORM) -> ProfileSummary:
    return ProfileSummary(
        name=u.name,
        email=u.email,
        profile_image=u.profile_image,
        date_of_birth=u.date_of_birth,
        position=u.position,
    )


# ---------- Asset ----------
def get_asset(db: Session, asset_id: str) -> Optional[Asset]:
    row = db.get(AssetORM, asset_id, populate_existing=True)
    return _asset_to_schema(row) if row else None


def create_asset(
    db: Session,
    body: AssetIn,
    *,
    hr_email: Optional[str],
    company_name: str = "",
    commit: bool = True,
) -> Asset:
    a = AssetORM(
        id=str(uuid4()),
        name=body.name,
        image=body.image,
        asset_type=body.asset_type,
        total_quantity=body.total_quantity,
        available_quantity=body.total_quantity,
        company_name=company_name,
        hr_email=hr_email,
        created_at=utcnow(),
    )
    db.add(a)
    persist(db, commit=commit)
    if commit:
        db.refresh(a)
    return _asset_to_schema(a)


def list_assets(
    db: Session,
    *,
    hr_email: Optional[str] = None,
    asset_type: Optional[str] = None,
    order: str = "desc",
) -> list[Asset]:
    stmt = select(AssetORM)
    if hr_email:
        stmt = stmt.where(AssetORM.hr_email == hr_email)
    if asset_type:
        stmt = stmt.where(AssetORM.asset_type == asset_type)

    desc = (order or "").lower() != "asc"
    stmt = stmt.order_by(AssetORM.created_at.desc() if desc else AssetORM.created_at.asc())
    rows = db.execute(stmt).scalars().all()
    return [_asset_to_schema(a) for a in rows]


def update_asset(db: Session, asset_id: str, body: AssetUpdate, *, commit: bool = True) -> Optional[Asset]:
    """Update the descriptive fields. Quantities go through resize_asset."""
    a = db.get(AssetORM, asset_id)
    if not a:
        return None

    data = body.model_dump(exclude_unset=True, exclude={"total_quantity"})
    for k, v in data.items():
        if v is not None:
            setattr(a, k, v)

    persist(db, commit=commit)
    if commit:
        db.refresh(a)
    return _asset_to_schema(a)


def resize_asset(db: Session, asset_id: str, new_total: int, *, commit: bool = True) -> bool:
    """
    Set total_quantity and shift available_quantity by the same delta, in one
    statement. Refused (False) when fewer units than are currently handed out.
    """
    in_use = AssetORM.total_quantity - AssetORM.available_quantity
    result = db.execute(
        update(AssetORM)
        .where(AssetORM.id == asset_id, in_use <= new_total)
        .values(
            available_quantity=AssetORM.available_quantity + (new_total - AssetORM.total_quantity),
            total_quantity=new_total,
        )
        .execution_options(synchronize_session=False)
    )
    persist(db, commit=commit)
    return result.rowcount > 0


def delete_asset(db: Session, asset_id: str, *, commit: bool = True) -> bool:
    result = db.execute(delete(AssetORM).where(AssetORM.id == asset_id))
    persist(db, commit=commit)
    return result.rowcount > 0


def adjust_available(db: Session, asset_id: str, delta: int, *, commit: bool = True) -> bool:
    """
    Atomic +1/-1 on available_quantity, evaluated by the database.

    Returns False when no row matched: the asset is gone, or the guard
    (available > 0 for -1, available < total for +1) did not hold.
    The row is not re-read here; callers read it back with get_asset.
    """
    if delta not in (1, -1):
        raise ValueError(f"delta must be +1 or -1, got {delta}")

    stmt = update(AssetORM).where(AssetORM.id == asset_id)
    if delta < 0:
        stmt = stmt.where(AssetORM.available_quantity > 0)
    else:
        stmt = stmt.where(AssetORM.available_quantity < AssetORM.total_quantity)
    stmt = stmt.values(available_quantity=AssetORM.available_quantity + delta)

    result = db.execute(stmt.execution_options(synchronize_session=False))
    persist(db, commit=commit)
    return result.rowcount > 0


# ---------- Request ----------
def create_request(
    db: Session,
    *,
    asset: Asset,
    requester_email: str,
    requester_name: Optional[str],
    note: Optional[str],
    commit: bool = True,
) -> AssetRequest:
    r = AssetRequestORM(
        id=str(uuid4()),
        asset_id=asset.id,
        asset_name=asset.name,
        asset_type=asset.asset_type,
        asset_image=asset.image,
        company_name=asset.company_name or "Unknown Company",
        hr_email=asset.hr_email,
        requester_name=requester_name,
        requester_email=requester_email,
        note=note or "",
        status="pending",
        request_date=utcnow(),
        approval_date=None,
        return_date=None,
        processed_by=None,
    )
    db.add(r)
    persist(db, commit=commit)
    if commit:
        db.refresh(r)
    return _request_to_schema(r)


def get_request(db: Session, request_id: str) -> Optional[AssetRequest]:
    row = db.get(AssetRequestORM, request_id, populate_existing=True)
    return _request_to_schema(row) if row else None


def set_request_status(
    db: Session,
    request_id: str,
    *,
    expected: str,
    new: str,
    fields: Optional[dict[str, Any]] = None,
    commit: bool = True,
) -> bool:
    """
    Compare-and-set on status. False means the row is missing or its status
    was no longer `expected` when the UPDATE ran.
    """
    values = dict(fields or {})
    values["status"] = new
    result = db.execute(
        update(AssetRequestORM)
        .where(AssetRequestORM.id == request_id, AssetRequestORM.status == expected)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    persist(db, commit=commit)
    return result.rowcount > 0


def list_requests_by_requester(db: Session, email: str) -> list[AssetRequest]:
    stmt = (
        select(AssetRequestORM)
        .where(AssetRequestORM.requester_email == email)
        .order_by(AssetRequestORM.request_date.desc())
    )
    return [_request_to_schema(r) for r in db.execute(stmt).scalars().all()]


def list_requests_by_company(
    db: Session,
    company_name: str,
    status: Optional[str] = None,
    *,
    hr_email: Optional[str] = None,
) -> list[AssetRequest]:
    stmt = select(AssetRequestORM).where(AssetRequestORM.company_name == company_name)
    if hr_email:
        stmt = stmt.where(AssetRequestORM.hr_email == hr_email)
    if status:
        stmt = stmt.where(AssetRequestORM.status == status)
    stmt = stmt.order_by(AssetRequestORM.request_date.desc())
    return [_request_to_schema(r) for r in db.execute(stmt).scalars().all()]


def list_requests(
    db: Session,
    *,
    hr_email: Optional[str] = None,
    status: Optional[str] = None,
    newest_first: bool = True,
) -> list[AssetRequest]:
    stmt = select(AssetRequestORM)
    if hr_email:
        stmt = stmt.where(AssetRequestORM.hr_email == hr_email)
    if status:
        stmt = stmt.where(AssetRequestORM.status == status)
    col = AssetRequestORM.request_date
    stmt = stmt.order_by(col.desc() if newest_first else col.asc())
    return [_request_to_schema(r) for r in db.execute(stmt).scalars().all()]


def approved_requester_emails(
    db: Session,
    *,
    hr_email: Optional[str] = None,
    company_name: Optional[str] = None,
) -> list[str]:
    stmt = select(AssetRequestORM.requester_email).where(AssetRequestORM.status == "approved")
    if hr_email:
        stmt = stmt.where(AssetRequestORM.hr_email == hr_email)
    if company_name:
        stmt = stmt.where(AssetRequestORM.company_name == company_name)
    stmt = stmt.distinct().order_by(AssetRequestORM.requester_email.asc())
    return [r[0] for r in db.execute(stmt).all()]


def approved_companies_of(db: Session, email: str) -> list[str]:
    stmt = (
        select(AssetRequestORM.company_name)
        .where(AssetRequestORM.requester_email == email, AssetRequestORM.status == "approved")
        .distinct()
        .order_by(AssetRequestORM.company_name.asc())
    )
    return [r[0] for r in db.execute(stmt).all()]


# ---------- User ----------
def get_user_by_email(db: Session, email: str) -> Optional[User]:
    row = db.execute(select(UserORM).where(UserORM.email == email)).scalar_one_or_none()
    return _user_to_schema(row) if row else None


def upsert_user(db: Session, *, email: str, name: str, role: str, commit: bool = True, **fields: Any) -> User:
    """Write seam for the identity collaborator; this service only reads users."""
    u = db.execute(select(UserORM).where(UserORM.email == email)).scalar_one_or_none()
    if u is None:
        u = UserORM(id=str(uuid4()), email=email, name=name, role=role, created_at=utcnow())
        db.add(u)
    else:
        u.name = name
        u.role = role
    for k, v in fields.items():
        setattr(u, k, v)
    persist(db, commit=commit)
    if commit:
        db.refresh(u)
    return _user_to_schema(u)


def list_profiles(db: Session, emails: list[str], *, role: Optional[str] = None) -> list[ProfileSummary]:
    if not emails:
        return []
    stmt = select(UserORM).where(UserORM.email.in_(emails))
    if role:
        stmt = stmt.where(UserORM.role == role)
    stmt = stmt.order_by(UserORM.email.asc())
    return [_user_to_profile(u) for u in db.execute(stmt).scalars().all()]
