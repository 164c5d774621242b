from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String

from app.constants.roles import DEFAULT_ROLES
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=True)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    # An actor may hold several role tags at once
    roles = Column(JSON, nullable=False, default=lambda: list(DEFAULT_ROLES))

    # Capability lists, collection slugs only (see app.constants.collections)
    editable_collections = Column(JSON, nullable=False, default=list)
    visible_collections = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
