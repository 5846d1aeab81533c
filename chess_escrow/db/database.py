"""Generate database session"""

from collections.abc import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chess_escrow.core.config import Settings, get_settings
from chess_escrow.db.schema import Base


def build_engine(settings: Settings | None = None) -> Engine:
    """Create the engine and make sure all tables exist."""
    settings = settings or get_settings()
    engine = create_engine(settings.database_url, echo=settings.echo_sql)
    Base.metadata.create_all(bind=engine)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    # autoflush off: nothing reaches the database before the operation commits
    return sessionmaker(bind=engine, autoflush=False)


def get_db(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
