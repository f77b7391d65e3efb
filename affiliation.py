"""
Employee/company groupings derived from approved requests.

Nothing here is stored: every call reads the current approved requests, so
an employee belongs to a company for exactly as long as they hold at least
one approved request there.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

import billing
import crud
from models import HeadcountUsage, Identity, ProfileSummary, TeamGroup

logger = logging.getLogger("app.affiliation")


def employees_of_company(db: Session, approver: Identity) -> list[ProfileSummary]:
    emails = crud.approved_requester_emails(db, hr_email=approver.email)
    if not emails:
        return []
    return crud.list_profiles(db, emails, role="employee")


def team_of(db: Session, employee_email: str) -> list[TeamGroup]:
    # the employee shows up in their own colleague list
    teams: list[TeamGroup] = []
    for company_name in crud.approved_companies_of(db, employee_email):
        emails = crud.approved_requester_emails(db, company_name=company_name)
        if not emails:
            continue
        teams.append(
            TeamGroup(
                company_name=company_name,
                colleagues=crud.list_profiles(db, emails),
            )
        )
    logger.debug("team_resolved email=%s companies=%s", employee_email, len(teams))
    return teams


def headcount_usage(db: Session, approver: Identity) -> HeadcountUsage:
    """Affiliated employees against the approver's package limit. Not enforced."""
    current = len(crud.approved_requester_emails(db, hr_email=approver.email))

    hr = crud.get_user_by_email(db, approver.email)
    limit: Optional[int] = hr.package_limit if hr else None
    package_name: Optional[str] = None
    if hr and hr.subscription:
        pkg = billing.get_package(db, hr.subscription)
        if pkg:
            package_name = pkg.name
            if limit is None:
                limit = pkg.employee_limit
    return HeadcountUsage(current=current, limit=limit, package=package_name)
