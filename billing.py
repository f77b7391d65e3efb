import logging
from typing import Optional
from uuid import uuid4

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from models import Package
from orm import PackageORM, UserORM

logger = logging.getLogger("app.billing")

DEFAULT_PACKAGES = (
    {
        "name": "Basic",
        "employee_limit": 5,
        "price": 5,
        "features": ["Asset Tracking", "Employee Management", "Basic Support"],
    },
    {
        "name": "Standard",
        "employee_limit": 10,
        "price": 8,
        "features": ["All Basic features", "Advanced Analytics", "Priority Support"],
    },
    {
        "name": "Premium",
        "employee_limit": 20,
        "price": 15,
        "features": ["All Standard features", "Custom Branding", "24/7 Support"],
    },
)


def _package_to_schema(p: PackageORM) -> Package:
    return Package(
        name=p.name,
        employee_limit=p.employee_limit,
        price=p.price,
        features=list(p.features or []),
    )


def seed_packages(db: Session) -> int:
    """Insert the default tiers into an empty table. Returns rows inserted."""
    count = db.execute(select(func.count()).select_from(PackageORM)).scalar_one()
    if int(count) > 0:
        return 0

    for tier in DEFAULT_PACKAGES:
        db.add(PackageORM(id=str(uuid4()), **tier))
    db.commit()
    logger.info("packages_seeded count=%s", len(DEFAULT_PACKAGES))
    return len(DEFAULT_PACKAGES)


def list_packages(db: Session) -> list[Package]:
    rows = db.execute(select(PackageORM).order_by(PackageORM.price.asc())).scalars().all()
    return [_package_to_schema(p) for p in rows]


def get_package(db: Session, name: str) -> Optional[Package]:
    # subscriptions are stored lowercased on the hr user
    row = db.execute(
        select(PackageORM).where(func.lower(PackageORM.name) == (name or "").strip().lower())
    ).scalar_one_or_none()
    return _package_to_schema(row) if row else None


def upgrade(db: Session, hr_email: str, package_name: str) -> Optional[Package]:
    """Move an hr user onto `package_name`. None if either side is unknown."""
    pkg = get_package(db, package_name)
    if pkg is None:
        return None

    result = db.execute(
        update(UserORM)
        .where(UserORM.email == hr_email, UserORM.role == "hr")
        .values(subscription=pkg.name.lower(), package_limit=pkg.employee_limit)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        return None
    db.commit()
    logger.info("package_upgraded hr=%s package=%s limit=%s", hr_email, pkg.name, pkg.employee_limit)
    return pkg
