from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from .db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    text = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    is_cleared = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    completed_at = Column(DateTime(timezone=True), nullable=True)


class TaskHistoryModel(Base):
    __tablename__ = "task_history"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    task_id = Column(String(36), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=False, index=True)


class UserSettingsModel(Base):
    __tablename__ = "user_settings"

    user_id = Column(String(64), primary_key=True)
    streak_duration = Column(String(20), nullable=False, default="monthly")
    timezone = Column(String(8), nullable=False, default="IST")
    theme = Column(String(10), nullable=False, default="dark")
    show_history = Column(Boolean, nullable=False, default=True)
    max_history_items = Column(Integer, nullable=False, default=10)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class UserStreaksModel(Base):
    __tablename__ = "user_streaks"

    user_id = Column(String(64), primary_key=True)
    daily_streak = Column(Integer, nullable=False, default=0)
    weekly_streak = Column(Integer, nullable=False, default=0)
    monthly_streak = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class UserProfileModel(Base):
    __tablename__ = "user_profiles"

    user_id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False, default="")
    email = Column(String(320), nullable=False, default="")
    phone = Column(String(40), nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
