from sqlalchemy import Column, Integer, String, DateTime

from kanban_board.db.base import Base, utcnow


class Tag(Base):
    """Flat tag catalog, names are globally unique"""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True)
    color = Column(String(7), nullable=False, default="#6b7280")
    created_at = Column(DateTime, default=utcnow)
