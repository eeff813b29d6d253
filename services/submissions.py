"""
services/submissions.py

Form rules shared by the OD request, meeting and stayback endpoints.
"""

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.users import User as UserModel
from schemas.meetings import MeetingCreate
from schemas.od_requests import ODFormSubmit
from services.time_validation import (
    BusinessHours, convert_to_12_hour, is_outside_business_hours, parse_time, validate_time_range,
)
from utils.exceptions import ValidationError

TEAM_OPTIONS = [
    "Event Coordinator",
    "Committee Coordinator",
    "Content",
    "Development",
    "Design",
    "Documentation",
    "Helpdesk and Registration",
    "Hosting",
    "Logistics & Requirements",
    "Marketing",
    "Non-technical Events",
    "Social Media",
    "Technical",
    "Workshops",
    "Sponsorship",
    "Media",
    "Decoration",
]

INVALID_TIME_MESSAGE = "Please enter a valid time"


def validate_team(team: str) -> None:
    if team not in TEAM_OPTIONS:
        raise ValidationError("Please select a team", details={"allowed": TEAM_OPTIONS})


def validate_od_form(form: ODFormSubmit, window: Optional[BusinessHours] = None) -> Optional[str]:
    """First problem with an OD form, in the order the form reports them."""
    if not form.user_ids:
        return "Please select at least one student"
    if not form.reason.strip():
        return "Please enter a reason"
    if not form.description.strip():
        return "Please enter a description"
    if not form.from_time:
        return "Please select start time"
    if not form.to_time:
        return "Please select end time"
    try:
        return validate_time_range(form.from_time, form.to_time, window)
    except ValueError:
        return INVALID_TIME_MESSAGE


def business_hours_warning(window: BusinessHours) -> str:
    return (
        f"Selected time is outside business hours "
        f"({convert_to_12_hour(window.start)} - {convert_to_12_hour(window.end)}). Confirm to submit anyway."
    )


def validate_meeting_form(form: MeetingCreate, window: Optional[BusinessHours] = None) -> None:
    """
    Team and time checks for a meeting. Start must precede end; times outside
    business hours need confirm_outside_hours.
    """
    window = window or BusinessHours.from_settings()
    validate_team(form.team)
    try:
        error = validate_time_range(
            form.from_time, form.to_time, window,
            start_modifier=form.from_time_modifier, end_modifier=form.to_time_modifier,
            enforce_window=False,
        )
        outside = (
            is_outside_business_hours(form.from_time, form.from_time_modifier, window)
            or is_outside_business_hours(form.to_time, form.to_time_modifier, window)
        )
    except ValueError:
        raise ValidationError(INVALID_TIME_MESSAGE)
    if error:
        raise ValidationError(error)
    if outside and not form.confirm_outside_hours:
        raise ValidationError(business_hours_warning(window), code="BUSINESS_HOURS_WARNING")


def combine(day: date, value: str, modifier: Optional[str] = None) -> datetime:
    return datetime.combine(day, parse_time(value, modifier))


def resolve_students(db: Session, emails: List[str]) -> List[UserModel]:
    """Roster users for the given emails; unknown emails are a validation error."""
    wanted = list(dict.fromkeys(e.strip().lower() for e in emails if e and e.strip()))
    if not wanted:
        return []
    users = db.query(UserModel).filter(func.lower(UserModel.email).in_(wanted)).all()
    found = {u.email.lower() for u in users}
    missing = [e for e in wanted if e not in found]
    if missing:
        raise ValidationError("Unknown student email(s)", details={"emails": missing})
    return users
