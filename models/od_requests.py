import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database.db import Base

from models.users import User as UserModel


class RequestStatus(enum.IntEnum):
    REJECTED = -1
    PENDING = 0
    APPROVED = 1


# ✅ on-duty request submitted by a team lead for one student
class ODRequest(Base):
    __tablename__ = "od_requests"

    id = Column(Integer, primary_key=True, index=True)                          # OD request ID (PK)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # student
    teamlead_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # submitting team lead
    reason = Column(String(100), nullable=False)                                # reason (usually the team)
    description = Column(Text, nullable=False)                                  # what the student will work on
    from_time = Column(DateTime, nullable=False)                                # start of the OD window
    to_time = Column(DateTime, nullable=False)                                  # end of the OD window
    status = Column(Integer, nullable=False, default=int(RequestStatus.PENDING), index=True)  # -1 / 0 / 1
    request_type = Column(String(50), nullable=False, default="OD Request")
    date = Column(DateTime, nullable=False, server_default=func.now(), index=True)  # submission time

    # ✅ relationships
    user = relationship(UserModel, foreign_keys=[user_id], backref="od_requests", lazy="joined")
    teamlead = relationship(UserModel, foreign_keys=[teamlead_id], lazy="joined")
