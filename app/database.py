from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import DATABASE_URL

# SQLite connections are shared with the threadpool that runs sync routes
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Create database engine
engine = create_engine(DATABASE_URL, pool_pre_ping=True, echo=False, connect_args=connect_args)

# Create declarative base
Base = declarative_base()


# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Dependency for database session
def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        # Nothing from a failed request may be committed later
        db.rollback()
        raise
    finally:
        db.close()
