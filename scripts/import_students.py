import argparse
import csv
from typing import Iterable, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session

from database.db import Base, SessionLocal, engine
from models import meetings, od_requests, staybacks  # noqa: F401  (create_all needs every table)
from models.users import ROLES, User as UserModel
from schemas.users import RosterEntry
from services.roster_client import roster_client
from utils.security import get_password_hash

CSV_PATH = "data/students.csv"  # ✅ default file path (name,email,sec,year,role,password)


def read_csv(path: str) -> Iterable[RosterEntry]:
    with open(path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for line_no, row in enumerate(reader, start=2):
            row = {k: (v.strip() if isinstance(v, str) else v) for k, v in row.items()}
            # empty cells fall back to the field defaults
            row = {k: v for k, v in row.items() if v not in ("", None)}
            try:
                yield RosterEntry.model_validate(row)
            except PydanticValidationError as e:
                print(f"⚠️ line {line_no} skipped: {e.errors()[0]['msg']}")


def upsert_roster(db: Session, entries: Iterable[RosterEntry]) -> Tuple[int, int]:
    """Insert new users, refresh name/section/year/role of known ones (matched by email)."""
    created = updated = 0
    for entry in entries:
        email = entry.email.strip().lower()
        role = entry.role if entry.role in ROLES else "Student"
        user = db.query(UserModel).filter(func.lower(UserModel.email) == email).first()
        if user is None:
            user = UserModel(email=email)
            db.add(user)
            created += 1
        else:
            updated += 1
        user.name = entry.name
        user.sec = entry.sec
        user.year = entry.year
        user.role = role
        if entry.password:
            user.password_hash = get_password_hash(entry.password)
        db.flush()
    db.commit()
    return created, updated


def load_entries(csv_path: Optional[str] = None, from_api: bool = False,
                 section: Optional[str] = None, year: Optional[int] = None) -> Iterable[RosterEntry]:
    if from_api:
        return roster_client.fetch_students(section=section, year=year)
    return read_csv(csv_path or CSV_PATH)


def main():
    parser = argparse.ArgumentParser(description="Import the student roster")
    parser.add_argument("--csv", default=None, help=f"CSV file (default {CSV_PATH})")
    parser.add_argument("--from-api", action="store_true", help="pull from the roster directory API")
    parser.add_argument("--section", default=None)
    parser.add_argument("--year", type=int, default=None)
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db: Session = SessionLocal()
    try:
        entries = load_entries(args.csv, args.from_api, args.section, args.year)
        created, updated = upsert_roster(db, entries)
    finally:
        db.close()
    print(f"✅ roster import done: {created} created, {updated} updated")


if __name__ == "__main__":
    main()
