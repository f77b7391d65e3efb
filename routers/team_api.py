from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import affiliation
from dependencies import get_db, require_employee, require_hr
from models import HeadcountUsage, Identity, ProfileSummary, TeamGroup

router = APIRouter()


@router.get("/hr/employees", response_model=list[ProfileSummary])
def company_employees_api(
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    return affiliation.employees_of_company(db, hr)


@router.get("/hr/employees/usage", response_model=HeadcountUsage)
def headcount_usage_api(
    db: Session = Depends(get_db),
    hr: Identity = Depends(require_hr),
):
    return affiliation.headcount_usage(db, hr)


@router.get("/employee/my-team", response_model=list[TeamGroup])
def my_team_api(
    db: Session = Depends(get_db),
    user: Identity = Depends(require_employee),
):
    return affiliation.team_of(db, user.email)
