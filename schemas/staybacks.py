from pydantic import BaseModel, Field
from datetime import date as date_type
from typing import List, Literal


class StaybackCreate(BaseModel):
    team: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    date: date_type
    students: List[str] = []                      # participant emails


class StaybackStudentsPatch(BaseModel):
    action: Literal["add", "remove"]
    emails: List[str]


class DateGroup(BaseModel):
    id: int
    date: date_type


class Stayback(BaseModel):
    id: int
    team: str
    title: str
    dateGroup: DateGroup
    students: List[str] = []


# ✅ GET /api/staybacks row: one date and its staybacks
class StaybackGroup(BaseModel):
    date: date_type
    items: List[Stayback]
