from __future__ import annotations

from sqlalchemy import JSON, Column, Text

from ..db.session import Base


class Issue(Base):
    __tablename__ = "issues"

    id = Column(Text, primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Text, nullable=False, default="story")
    priority = Column(Text, nullable=False, default="medium")
    status = Column(Text, nullable=False, default="todo", index=True)
    assignee = Column(Text, nullable=True)
    reported_by = Column(Text, nullable=True)
    # Project code and epic link are advisory text, not foreign keys.
    project = Column(Text, nullable=True)
    environment = Column(Text, nullable=True)
    labels = Column(JSON, nullable=True)
    sprint = Column(Text, nullable=True)
    epic_link = Column(Text, nullable=True)
    steps_to_reproduce = Column(Text, nullable=True)
    actual_result = Column(Text, nullable=True)
    expected_result = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=True)
    created_at = Column(Text, nullable=False, index=True)
    updated_at = Column(Text, nullable=False)
    status_date = Column(Text, nullable=True)
    raised_date = Column(Text, nullable=True)
    closed_date = Column(Text, nullable=True)


__all__ = ["Issue"]
