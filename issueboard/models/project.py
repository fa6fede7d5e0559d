"""SQLAlchemy model for the projects an issue can be filed against."""

from __future__ import annotations

from sqlalchemy import Column, Text

from ..db.session import Base


class Project(Base):
    """Named project; ``code`` is the short prefix shown next to issues."""

    __tablename__ = "projects"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    code = Column(Text, nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    user_role = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)


__all__ = ["Project"]
