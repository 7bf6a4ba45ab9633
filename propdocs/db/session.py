from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker

from ..config import settings


def _connect_args(database_url: str) -> dict:
    # sync endpoints run in the threadpool, so sqlite connections cross threads
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.database_url),
)

# Request handlers open their own sessions from the plain factory; the
# thread-scoped registry is for the CLI, seed and scripts only.
SessionFactory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
SessionLocal = scoped_session(SessionFactory)


def get_engine():
    return engine
