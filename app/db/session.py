# app/db/session.py
from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy import Engine
from sqlalchemy.orm import Session
from sqlalchemy.exc import OperationalError

from app.db.models import Base


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    db = factory()
    try:
        yield db
        # read-only scopes make this a no-op
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
    finally:
        try:
            db.close()
        except OperationalError:
            # underlying socket already dead; dispose pool to force fresh conns next time
            bind = db.get_bind()
            if bind is not None:
                bind.dispose()
