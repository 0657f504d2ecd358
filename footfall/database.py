from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from footfall.config import DATABASE_URL
from footfall.models import footfall as footfall_models  # noqa: F401  registers the footfall tables on Base.metadata

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
