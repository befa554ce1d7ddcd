"""Event model."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.db.base import Base, TimestampMixin
from eventhub.models.associations import event_participants

if TYPE_CHECKING:
    from eventhub.models.activity import Activity
    from eventhub.models.company import Company
    from eventhub.models.user import User


class Event(TimestampMixin, Base):
    """Event hosted by a company."""

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Image reference "<mime>:<path to compressed variant>"
    cover_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id"), index=True)
    company: Mapped["Company"] = relationship(back_populates="events")

    # Activities are deleted explicitly by the service so their images can be removed
    activities: Mapped[list["Activity"]] = relationship(back_populates="event")
    participants: Mapped[list["User"]] = relationship(
        secondary=event_participants, back_populates="events"
    )
