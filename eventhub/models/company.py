"""Company model."""

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from eventhub.models.event import Event
    from eventhub.models.user import User


class Company(TimestampMixin, Base):
    """A company hosting events; users belong to at most one company."""

    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), unique=True)

    users: Mapped[list["User"]] = relationship(back_populates="company")
    events: Mapped[list["Event"]] = relationship(back_populates="company")
