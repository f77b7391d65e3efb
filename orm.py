from datetime import datetime
from sqlalchemy import CheckConstraint, String, DateTime, Text, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from db import Base

class AssetORM(Base):
    __tablename__ = "assets"
    __table_args__ = (
        CheckConstraint("available_quantity >= 0", name="ck_assets_available_non_negative"),
        CheckConstraint("available_quantity <= total_quantity", name="ck_assets_available_le_total"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    image: Mapped[str] = mapped_column(String, nullable=False)
    asset_type: Mapped[str] = mapped_column(String, nullable=False)

    total_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    company_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    hr_email: Mapped[str | None] = mapped_column(String, nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

class AssetRequestORM(Base):
    __tablename__ = "requests"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    # no FK: requests outlive the asset they were made against
    asset_id: Mapped[str] = mapped_column(String, nullable=False, index=True)

    asset_name: Mapped[str] = mapped_column(String, nullable=False)
    asset_type: Mapped[str] = mapped_column(String, nullable=False)
    asset_image: Mapped[str | None] = mapped_column(String, nullable=True)
    company_name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    hr_email: Mapped[str | None] = mapped_column(String, nullable=True, index=True)

    requester_name: Mapped[str | None] = mapped_column(String, nullable=True)
    requester_email: Mapped[str] = mapped_column(String, nullable=False, index=True)
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[str] = mapped_column(String, nullable=False, default="pending", index=True)

    request_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    approval_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    return_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    processed_by: Mapped[str | None] = mapped_column(String, nullable=True)


class UserORM(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    role: Mapped[str] = mapped_column(String, nullable=False)

    profile_image: Mapped[str | None] = mapped_column(String, nullable=True)
    date_of_birth: Mapped[str | None] = mapped_column(String, nullable=True)
    position: Mapped[str | None] = mapped_column(String, nullable=True)

    # hr only
    company_name: Mapped[str | None] = mapped_column(String, nullable=True)
    company_logo: Mapped[str | None] = mapped_column(String, nullable=True)
    subscription: Mapped[str | None] = mapped_column(String, nullable=True)
    package_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class PackageORM(Base):
    __tablename__ = "packages"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    employee_limit: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
