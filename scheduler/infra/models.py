from __future__ import annotations

from sqlalchemy import Column, Integer, String, Text

from .db import Base


class TaskModel(Base):
    __tablename__ = "scheduler"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(8), nullable=False, default="", index=True)
    title = Column(String(255), nullable=False, default="")
    comment = Column(Text, nullable=False, default="")
    repeat = Column(String(128), nullable=False, default="")
