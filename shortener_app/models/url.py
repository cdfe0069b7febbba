from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from shortener_app.database.connection import Base


class URL(Base):
    """
    A stored association between a long URL and its short code.

    The row is created first to obtain the auto-increment id, then the
    short code (derived from that id) is written in the same transaction.
    """
    __tablename__ = "urls"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # unique=True creates the index used by exact-match lookups
    long_url = Column(String(2048), unique=True, nullable=False)
    # Nullable=True allows two-step creation: first get ID, then generate short_code
    short_code = Column(String(6), unique=True, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<URL id={self.id} short_code={self.short_code!r}>"
