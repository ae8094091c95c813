import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from inventory.config import settings

logger = logging.getLogger(__name__)

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session):
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db(bind=None):
    # Import all models so Base.metadata knows about them
    import inventory.models.product  # noqa: F401
    import inventory.models.supplier  # noqa: F401
    import inventory.models.transaction  # noqa: F401
    import inventory.models.user  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database schema ready")
