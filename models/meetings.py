from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from database.db import Base

# ✅ FK target model
from models.users import User as UserModel

# ✅ meeting <-> student attendance (many-to-many)
meeting_attendees = Table(
    "meeting_attendees",
    Base.metadata,
    Column("meeting_id", Integer, ForeignKey("meetings.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


# ✅ team meeting table
class Meeting(Base):
    __tablename__ = "meetings"

    id = Column(Integer, primary_key=True, index=True)         # meeting ID (PK)
    team = Column(String(100), nullable=False)                 # organising team
    title = Column(String(200), nullable=False)                # meeting title
    date = Column(Date, nullable=False, index=True)            # meeting day (YYYY-MM-DD)
    from_time = Column(DateTime, nullable=False)               # start (date + time)
    to_time = Column(DateTime, nullable=False)                 # end (date + time)

    # ✅ attendees, ordered by name for stable output
    students = relationship(UserModel, secondary=meeting_attendees, backref="meetings", order_by=UserModel.name)
