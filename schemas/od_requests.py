from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, date as date_type
from typing import List, Optional

# ==========================================================
# [input schemas]
# ==========================================================
class ODRequestCreate(BaseModel):
    user_id: int                               # student ID
    reason: str = Field(..., min_length=1)     # reason (usually the team)
    description: str = Field(..., min_length=1)
    teamlead_id: int                           # submitting team lead ID
    from_time: datetime                        # OD start
    to_time: datetime                          # OD end
    request_type: str = Field(..., min_length=1)


class ModifyTimings(BaseModel):
    requestIds: List[int]                      # rows to retime
    from_time: datetime
    to_time: datetime


# ✅ OD form submitted by a team lead for several students at once
class ODFormSubmit(BaseModel):
    user_ids: List[int] = []
    reason: str = ""
    description: str = ""
    from_time: str = ""                        # "HH:MM" (24h) or "h:mm AM"
    to_time: str = ""
    date: Optional[date_type] = None           # OD day, defaults to today


# ==========================================================
# [output schemas]
# ==========================================================
class ODRequest(BaseModel):
    id: int
    user_id: int
    teamlead_id: int
    reason: str
    description: str
    from_time: datetime
    to_time: datetime
    status: int                                # -1 rejected / 0 pending / 1 approved
    request_type: str
    date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ flattened request + student row returned by GET /api/od-request
class ODRequestListItem(BaseModel):
    od_id: int
    user_id: int
    name: str
    sec: Optional[str] = None
    year: Optional[int] = None
    reason: str
    description: str
    from_time: datetime
    to_time: datetime
    status: int
    request_type: str
    date: Optional[datetime] = None


class BulkResult(BaseModel):
    count: int                                 # rows that matched and were updated
