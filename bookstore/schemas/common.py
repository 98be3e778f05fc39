from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


# Uniform success envelope
class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None
