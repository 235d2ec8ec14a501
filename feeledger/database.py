import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from feeledger.config import settings
from feeledger.errors import PersistenceError

logger = logging.getLogger(__name__)


def _make_engine(url):
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory DB must be shared by every session
            options["poolclass"] = StaticPool
        return create_engine(url, **options)
    return create_engine(url, pool_pre_ping=True)


engine = _make_engine(settings.DATABASE_URL)

# Service role engine: used only by the public fee check
if settings.SERVICE_DATABASE_URL == settings.DATABASE_URL:
    service_engine = engine
else:
    service_engine = _make_engine(settings.SERVICE_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
ServiceSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=service_engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_service_db():
    db = ServiceSessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # Import models so they are registered on Base.metadata
    from feeledger import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    if service_engine is not engine:
        Base.metadata.create_all(bind=service_engine)


@contextmanager
def store_call(db, action):
    """Run record store work; any SQLAlchemy failure becomes a PersistenceError."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s failed: %s", action, e)
        raise PersistenceError() from e
