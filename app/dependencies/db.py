# app/dependencies/db.py
from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session from the app's session factory and always close it."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
