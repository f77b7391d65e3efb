from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

AssetType = Literal["Returnable", "Non-returnable"]
RequestStatus = Literal["pending", "approved", "rejected", "returned"]
Role = Literal["hr", "employee"]

class AssetIn(BaseModel):
    name: str
    image: str
    asset_type: AssetType
    total_quantity: int = Field(ge=0)

class AssetUpdate(BaseModel):
    name: Optional[str] = None
    image: Optional[str] = None
    asset_type: Optional[AssetType] = None
    total_quantity: Optional[int] = Field(default=None, ge=0)

class Asset(BaseModel):
    id: str
    name: str
    image: str
    asset_type: AssetType
    total_quantity: int
    available_quantity: int
    company_name: str = ""
    hr_email: Optional[str] = None
    created_at: datetime

class AssetRequestIn(BaseModel):
    asset_id: str
    note: Optional[str] = None

class AssetRequest(BaseModel):
    id: str
    asset_id: str
    asset_name: str
    asset_type: AssetType
    asset_image: Optional[str] = None
    company_name: str
    hr_email: Optional[str] = None
    requester_name: Optional[str] = None
    requester_email: str
    note: str = ""
    status: RequestStatus
    request_date: datetime
    approval_date: Optional[datetime] = None
    return_date: Optional[datetime] = None
    processed_by: Optional[str] = None

class Identity(BaseModel):
    id: str
    email: str
    role: Role

class User(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    profile_image: Optional[str] = None
    date_of_birth: Optional[str] = None
    position: Optional[str] = None
    company_name: Optional[str] = None
    company_logo: Optional[str] = None
    subscription: Optional[str] = None
    package_limit: Optional[int] = None

class ProfileSummary(BaseModel):
    name: str
    email: str
    profile_image: Optional[str] = None
    date_of_birth: Optional[str] = None
    position: Optional[str] = None

class TeamGroup(BaseModel):
    company_name: str
    colleagues: list[ProfileSummary]

class Package(BaseModel):
    name: str
    employee_limit: int
    price: int
    features: list[str] = []

class HeadcountUsage(BaseModel):
    current: int
    limit: Optional[int] = None
    package: Optional[str] = None

class UpgradeIn(BaseModel):
    package_name: str

class UpgradeOut(BaseModel):
    package: str
    employee_limit: int
    price: int
