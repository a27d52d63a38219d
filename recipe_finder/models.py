from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from .db import Base


class Favorite(Base):
    __tablename__ = "favorites"
    recipe_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    snapshot = Column(Text, nullable=False)  # JSON-encoded recipe
    created_at = Column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )
