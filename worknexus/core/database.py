from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from worknexus.core.config import settings


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_size": 10,
        "max_overflow": 20,
    }


# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        # Leave no half-applied changes behind a failed request
        db.rollback()
        raise
    finally:
        db.close()


def init_db():
    """
    Initialize database.

    Imports every model module so the tables are registered on Base.metadata,
    then creates any missing tables.
    """
    import worknexus.models  # noqa: F401  Register models
    Base.metadata.create_all(bind=engine)
