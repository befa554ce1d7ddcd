"""Activity model."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.db.base import Base, TimestampMixin
from eventhub.models.associations import activity_participants

if TYPE_CHECKING:
    from eventhub.models.event import Event
    from eventhub.models.user import User


class Activity(TimestampMixin, Base):
    """Activity taking place during an event."""

    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), index=True)
    event: Mapped["Event"] = relationship(back_populates="activities")

    participants: Mapped[list["User"]] = relationship(
        secondary=activity_participants, back_populates="activities"
    )
