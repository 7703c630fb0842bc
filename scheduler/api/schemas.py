from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from scheduler.domain.entities import TaskEntity


class TaskIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    date: str = ""
    title: str = ""
    comment: str = ""
    repeat: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("date", "title", "comment", "repeat", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        if value is None:
            return ""
        return value


class TaskOut(BaseModel):
    id: str
    date: str
    title: str
    comment: str
    repeat: str

    @classmethod
    def from_entity(cls, task: TaskEntity) -> "TaskOut":
        return cls(
            id=str(task.id),
            date=task.date,
            title=task.title,
            comment=task.comment,
            repeat=task.repeat,
        )


class TaskListOut(BaseModel):
    tasks: list[TaskOut]


class TaskCreatedOut(BaseModel):
    id: int


class SignInIn(BaseModel):
    password: str = ""


class TokenOut(BaseModel):
    token: str
