from __future__ import annotations

from sqlalchemy import Column, Text

from ..db.session import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Text, primary_key=True)
    # No foreign key: comments may outlive their issue.
    issue_id = Column(Text, nullable=False, index=True)
    comment_text = Column(Text, nullable=False)
    action_taken = Column(Text, nullable=True)
    solution_summary = Column(Text, nullable=True)
    created_by = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)


__all__ = ["Comment"]
