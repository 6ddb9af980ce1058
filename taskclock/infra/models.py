from __future__ import annotations

from sqlalchemy import Column, Integer, Text, text

from .db import Base


class TaskModel(Base):
    __tablename__ = "tasks"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    description = Column(Text, nullable=False)
    completed = Column(Integer, default=0, server_default=text("0"))
    accumulated_seconds = Column(Integer, default=0, server_default=text("0"))


TASK_COLUMNS = ("id", "description", "completed", "accumulated_seconds")
