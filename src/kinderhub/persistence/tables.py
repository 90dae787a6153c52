"""SQLAlchemy ORM tables for kinderhub persistence.

Columns mirror the fields of the domain model one to one so rows convert
with ``Model.model_validate(row)``. Only portable column types are used:
ids are ``String(26)``, timestamps are epoch milliseconds in ``BigInteger``
columns and lists are ``JSON``. The same metadata works on PostgreSQL
(asyncpg) and SQLite (aiosqlite).
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Float,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ID = String(26)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class TimestampMixin:
    create_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    update_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class SoftDeleteMixin:
    delete_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, index=True)


# -----------------------------------------------------------------------------
# Users and permissions
# -----------------------------------------------------------------------------


class UserTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(64), default="")
    last_name: Mapped[str] = mapped_column(String(64), default="")
    nickname: Mapped[str] = mapped_column(String(64), default="")
    roles: Mapped[str] = mapped_column(String(256), default="")
    locale: Mapped[str] = mapped_column(String(5), default="en")


class RoleTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    permissions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    scheme_managed: Mapped[bool] = mapped_column(Boolean, default=False)
    built_in: Mapped[bool] = mapped_column(Boolean, default=False)


class SchemeTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "schemes"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    scope: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    default_school_admin_role: Mapped[str] = mapped_column(String(64), default="")
    default_school_teacher_role: Mapped[str] = mapped_column(String(64), default="")
    default_school_parent_role: Mapped[str] = mapped_column(String(64), default="")


class EmojiTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "emoji"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    creator_id: Mapped[str] = mapped_column(ID, nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (UniqueConstraint("name", "delete_at", name="uq_emoji_name_delete_at"),)


class ReactionTable(TimestampMixin, Base):
    __tablename__ = "reactions"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    user_id: Mapped[str] = mapped_column(ID, nullable=False)
    target_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    emoji_name: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("user_id", "target_id", "emoji_name", name="uq_reaction_user_target"),
    )


# -----------------------------------------------------------------------------
# Schools
# -----------------------------------------------------------------------------


class SchoolTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "schools"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(String(255), default="")
    email: Mapped[str] = mapped_column(String(128), default="")
    phone: Mapped[str] = mapped_column(String(11), default="")
    contact_name: Mapped[str] = mapped_column(String(64), default="")
    address: Mapped[str] = mapped_column(String(255), default="")
    invite_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    allow_open_invite: Mapped[bool] = mapped_column(Boolean, default=False)
    scheme_id: Mapped[str | None] = mapped_column(ID, nullable=True)


class SchoolMemberTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "school_members"

    school_id: Mapped[str] = mapped_column(ID, primary_key=True)
    user_id: Mapped[str] = mapped_column(ID, primary_key=True, index=True)
    roles: Mapped[str] = mapped_column(String(256), default="")
    scheme_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    scheme_teacher: Mapped[bool] = mapped_column(Boolean, default=False)
    scheme_parent: Mapped[bool] = mapped_column(Boolean, default=False)


class BranchTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "branches"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    school_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(String(255), default="")
    creator_id: Mapped[str] = mapped_column(ID, default="")


class ClassTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "classes"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    school_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    branch_id: Mapped[str] = mapped_column(ID, default="", index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(String(255), default="")
    invite_id: Mapped[str] = mapped_column(ID, default="")
    allow_open_invite: Mapped[bool] = mapped_column(Boolean, default=False)
    creator_id: Mapped[str] = mapped_column(ID, default="")


# -----------------------------------------------------------------------------
# Kids
# -----------------------------------------------------------------------------


class KidTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "kids"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str] = mapped_column(String(64), nullable=False)
    nick_name: Mapped[str] = mapped_column(String(64), default="")
    avatar: Mapped[str] = mapped_column(String(256), default="")
    cover: Mapped[str] = mapped_column(String(256), default="")
    description: Mapped[str] = mapped_column(String(255), default="")
    dob: Mapped[int] = mapped_column(BigInteger, default=0)
    gender: Mapped[str] = mapped_column(String(16), default="")
    class_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    invite_id: Mapped[str] = mapped_column(ID, default="")


class KidGuardianTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "kid_guardians"

    kid_id: Mapped[str] = mapped_column(ID, primary_key=True)
    user_id: Mapped[str] = mapped_column(ID, primary_key=True, index=True)
    is_parent: Mapped[bool] = mapped_column(Boolean, default=True)


class HealthTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "healths"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    kid_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    height: Mapped[float] = mapped_column(Float, nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    measure_at: Mapped[int] = mapped_column(BigInteger, nullable=False)


class VaccineTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "vaccines"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    kid_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    vaccine_book_id: Mapped[int] = mapped_column(Integer, nullable=False)
    vaccine_name: Mapped[str] = mapped_column(String(100), nullable=False)
    time: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    place: Mapped[str] = mapped_column(String(255), default="")


class MedicineRequestTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "medicine_requests"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    kid_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    create_by: Mapped[str] = mapped_column(ID, nullable=False)
    from_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    to_date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    confirmed: Mapped[bool] = mapped_column(Boolean, default=False)
    confirm_by: Mapped[str] = mapped_column(ID, default="")


class MedicineTable(TimestampMixin, Base):
    __tablename__ = "medicines"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    request_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(128), nullable=False)
    note: Mapped[str] = mapped_column(String(128), default="")
    dosage: Mapped[str] = mapped_column(String(128), default="")


# -----------------------------------------------------------------------------
# Class activities
# -----------------------------------------------------------------------------


class MenuTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "menus"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    class_id: Mapped[str] = mapped_column(ID, nullable=False)
    week: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    food_name: Mapped[str] = mapped_column(String(24), nullable=False)
    description: Mapped[str] = mapped_column(String(128), default="")
    week_day: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    note: Mapped[str] = mapped_column(Text, default="")

    __table_args__ = (Index("idx_menus_class_week", "class_id", "year", "week"),)


class ScheduleTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "schedules"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    class_id: Mapped[str] = mapped_column(ID, nullable=False)
    week: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    subject: Mapped[str] = mapped_column(String(24), nullable=False)
    description: Mapped[str] = mapped_column(String(128), default="")
    week_day: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    end_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    __table_args__ = (Index("idx_schedules_class_week", "class_id", "year", "week"),)


class EventTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    class_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(String(255), default="")
    note: Mapped[str] = mapped_column(Text, default="")
    picture: Mapped[str] = mapped_column(String(256), default="")
    fee: Mapped[float] = mapped_column(Float, default=0)
    start_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    end_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    register_expired: Mapped[int] = mapped_column(BigInteger, default=0)
    is_all_class: Mapped[bool] = mapped_column(Boolean, default=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True)


class EventRegistrationTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "event_registrations"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    event_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    kid_id: Mapped[str] = mapped_column(ID, nullable=False)
    paid: Mapped[bool] = mapped_column(Boolean, default=False)
    register_by: Mapped[str] = mapped_column(ID, nullable=False)

    __table_args__ = (UniqueConstraint("event_id", "kid_id", name="uq_event_registration_kid"),)


class ActivityNoteTable(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "activity_notes"

    id: Mapped[str] = mapped_column(ID, primary_key=True)
    activity_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    note: Mapped[str] = mapped_column(String(128), default="")
    type: Mapped[str] = mapped_column(String(1), nullable=False)
    kid_id: Mapped[str] = mapped_column(ID, nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(ID, nullable=False)
