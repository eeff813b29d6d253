from sqlalchemy import Column, Integer, String, Date, ForeignKey, Table
from sqlalchemy.orm import relationship
from database.db import Base

from models.users import User as UserModel

# ✅ stayback <-> student (many-to-many)
stayback_students = Table(
    "stayback_students",
    Base.metadata,
    Column("stayback_id", Integer, ForeignKey("staybacks.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


# ✅ date bucket, created together with the first stayback of that day
class DateGroup(Base):
    __tablename__ = "date_groups"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, unique=True, index=True)

    staybacks = relationship("Stayback", back_populates="date_group", order_by="Stayback.id")


# ✅ after-hours work session
class Stayback(Base):
    __tablename__ = "staybacks"

    id = Column(Integer, primary_key=True, index=True)         # stayback ID (PK)
    team = Column(String(100), nullable=False)                 # team that stayed back
    title = Column(String(200), nullable=False)                # what was worked on
    date_group_id = Column(Integer, ForeignKey("date_groups.id"), nullable=False, index=True)

    date_group = relationship(DateGroup, back_populates="staybacks", lazy="joined")
    students = relationship(UserModel, secondary=stayback_students, backref="staybacks", order_by=UserModel.name)
