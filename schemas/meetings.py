from pydantic import BaseModel, Field
from datetime import date as date_type, datetime
from typing import List, Literal

Meridiem = Literal["AM", "PM"]

# ==========================================================
# [input schema]
# ==========================================================
class MeetingCreate(BaseModel):
    team: str = Field(..., min_length=1)          # organising team
    title: str = Field(..., min_length=1)         # meeting title
    date: date_type                               # meeting day
    from_time: str                                # "h:mm" (12h, see modifier)
    from_time_modifier: Meridiem = "AM"
    to_time: str
    to_time_modifier: Meridiem = "AM"
    students: List[str] = []                      # attendee emails
    confirm_outside_hours: bool = False           # proceed despite the business-hours warning

# ==========================================================
# [output schema]
# ==========================================================
class Meeting(BaseModel):
    id: int
    team: str
    title: str
    date: date_type
    from_time: datetime
    to_time: datetime
    students: List[str] = []                      # attendee emails
