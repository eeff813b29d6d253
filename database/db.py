from sqlalchemy import create_engine               # SQLAlchemy engine factory
from sqlalchemy.orm import declarative_base        # base class for models
from sqlalchemy.orm import sessionmaker            # session factory

from config.settings import settings               # ✅ environment-driven settings

# ✅ SQLite needs check_same_thread off because FastAPI serves sync routes from a threadpool
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# ✅ engine built from the configured DB URL
engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)

# ✅ session factory used by every request
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ declarative Base shared by all models
Base = declarative_base()


# ==========================================================
# [DB dependency] one session per request, always closed
# ==========================================================
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
