"""ORM model for roles (named permission tiers)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, false, func, true
from sqlalchemy.orm import relationship

from app.models.base import Base


class Role(Base):
    """
    Permission tier shared by many users.

    staff_status grants unrestricted visibility over users and groups.
    is_deletable is False only for the bootstrap role.
    """

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    is_deletable = Column(Boolean, nullable=False, default=True, server_default=true())
    staff_status = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    users = relationship("User", back_populates="role", passive_deletes="all")
