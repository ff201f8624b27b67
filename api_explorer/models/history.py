"""
History model for durable request history.

Each row is one HistoryEntry: the request that was sent plus the status
line it received.
"""

from typing import Optional

from sqlalchemy import BigInteger, Integer, String, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class HistoryRecord(Base):
    """
    SQLAlchemy model for request history.

    Attributes:
        seq: Insertion sequence, used to break timestamp ties and to
            decide which rows fall outside the retention cap
        id: Public identifier of the entry
        timestamp: Append time in epoch milliseconds
        method: HTTP method used
        url: Target URL as entered in the draft
        headers: Header rows as a JSON list of {id, key, value, enabled}
        body: Request body from the draft
        has_summary: Whether a response summary was supplied
        status_code: Response status code, if any
        status_text: Response status text, if any
    """
    __tablename__ = "history"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    timestamp: Mapped[int] = mapped_column(BigInteger, index=True)
    method: Mapped[str] = mapped_column(String(10))
    url: Mapped[str] = mapped_column(Text)
    headers: Mapped[list] = mapped_column(JSON, default=list)
    body: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    has_summary: Mapped[bool] = mapped_column(default=False)
    status_code: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    status_text: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
