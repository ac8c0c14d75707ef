from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from kanban_board.db.base import Base, utcnow


class LinkedPath(Base):
    """Binding of a filesystem path (optionally host-qualified) to a project"""

    __tablename__ = "linked_paths"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    path = Column(String, nullable=False, unique=True)
    hostname = Column(String, nullable=True)
    default_column_id = Column(Integer, ForeignKey("columns.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow)

    project = relationship("Project", back_populates="linked_paths")
