from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from kanban_board.db.base import Base, utcnow


class Project(Base):
    """Root of the board hierarchy"""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow)

    # Dependents are removed explicitly by ProjectService.delete; the FKs cascade as well
    columns = relationship("BoardColumn", back_populates="project", passive_deletes=True)
    tasks = relationship("Task", back_populates="project", passive_deletes=True)
    linked_paths = relationship("LinkedPath", back_populates="project", passive_deletes=True)
