"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.db.base import Base, TimestampMixin
from eventhub.models.associations import activity_participants, event_participants

if TYPE_CHECKING:
    from eventhub.models.activity import Activity
    from eventhub.models.company import Company
    from eventhub.models.event import Event


class User(TimestampMixin, Base):
    """User profile and login account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    company_department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    about_me: Mapped[str | None] = mapped_column(Text, nullable=True)
    allergies_or_preferences: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Image reference "<mime>:<path to compressed variant>"
    profile_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    is_superuser: Mapped[bool] = mapped_column(Boolean, default=False)

    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True
    )
    company: Mapped["Company | None"] = relationship(back_populates="users")

    events: Mapped[list["Event"]] = relationship(
        secondary=event_participants, back_populates="participants"
    )
    activities: Mapped[list["Activity"]] = relationship(
        secondary=activity_participants, back_populates="participants"
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
