from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from gatelink_app.database.connection import Base


class ShortLink(Base):
    """
    Short link record: maps a short identifier to its destination.

    Rows are created by the shorten endpoint and never deleted.
    The only mutation after creation is the click counter, which the
    first gate page increments.
    """
    __tablename__ = "short_links"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # unique=True also creates the index; it is the backstop for the
    # check-then-insert race in the random generator
    short_id = Column(String(32), unique=True, nullable=False, index=True)
    original_url = Column(String, nullable=False)
    clicks = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
