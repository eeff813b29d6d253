from pydantic import BaseModel, ConfigDict
from typing import Optional


# ✅ roster row as exposed to the UI (no password hash)
class Student(BaseModel):
    user_id: int
    name: str
    email: str
    sec: Optional[str] = None
    year: Optional[int] = None
    role: str


class StudentCounts(BaseModel):
    email: str
    stayback_cnt: int
    meeting_cnt: int


# ✅ roster import row (CSV / directory API)
class RosterEntry(BaseModel):
    name: str
    email: str
    sec: Optional[str] = None
    year: Optional[int] = None
    role: str = "Student"
    password: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class LoginRequest(BaseModel):
    email: str
    password: str


class SessionInfo(BaseModel):
    user_id: int
    name: str
    email: str
    role: str


class LoginResponse(BaseModel):
    token: str
    user: SessionInfo
