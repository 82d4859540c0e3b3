"""
models.py
----------
SQLAlchemy ORM model for the durable credential store.

The users table is keyed by email (unique); the surrogate integer id only
exists for the ORM. Password hashes are Argon2id strings that embed their own
salt, so no separate salt column is kept.
"""

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, func

from app.db.base import Base  # uses declarative_base()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class User(Base):
    """
    Core user record.
    - Created on registration; only password_hash changes afterwards.
    - Never deleted by this service.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
