from __future__ import annotations

from typing import Iterator

from sqlalchemy.orm import Session

from ..db.session import SessionFactory


def get_db() -> Iterator[Session]:
    """One session per request, never shared with the worker thread; rolled back when the handler fails."""
    db = SessionFactory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
