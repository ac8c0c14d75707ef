from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from kanban_board.db.base import Base, utcnow


class BoardColumn(Base):
    """Column of a project board; project_id is fixed at creation"""

    __tablename__ = "columns"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow)

    project = relationship("Project", back_populates="columns")
    tasks = relationship("Task", back_populates="column", passive_deletes=True)
