from sqlalchemy import Column, Integer, String
from database.db import Base

# ✅ roles known to the system
ROLE_STUDENT = "Student"
ROLE_TEAMLEAD = "TeamLead"
ROLE_ADMIN = "Admin"
ROLES = (ROLE_STUDENT, ROLE_TEAMLEAD, ROLE_ADMIN)


class User(Base):
    __tablename__ = "users"  # students, team leads and admins (roster import)

    id = Column(Integer, primary_key=True, index=True)               # user ID (PK)
    name = Column(String(100), nullable=False)                      # full name
    email = Column(String(150), nullable=False, unique=True, index=True)  # login / roster key
    sec = Column(String(10))                                        # section (A, B, C, D)
    year = Column(Integer)                                          # graduation year (e.g. 2026)
    role = Column(String(20), nullable=False, default=ROLE_STUDENT)  # Student / TeamLead / Admin
    password_hash = Column(String(100))                             # bcrypt hash, empty for students without login
