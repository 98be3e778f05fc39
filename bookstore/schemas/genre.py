from pydantic import BaseModel, ConfigDict, field_validator
from typing import ClassVar
from datetime import datetime
import uuid


def _trim_name(v: object) -> object:
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
    return v


# Genre create schema
class GenreCreate(BaseModel):
    name: str

    @field_validator("name", mode="before")
    @classmethod
    def trim_and_check(cls, v: object) -> object:
        return _trim_name(v)


# Genre update schema
class GenreUpdate(GenreCreate):
    pass


# Genre reference embedded in books and transaction items
class GenreSummary(BaseModel):
    id: uuid.UUID
    name: str

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)


# Genre read schema
class GenreRead(GenreSummary):
    created_at: datetime
    updated_at: datetime
