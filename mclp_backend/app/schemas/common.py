"""
Shared schema building blocks.

Wire format is camelCase; Python attributes stay snake_case.
"""

from typing import Generic, List, Optional, TypeVar
from typing_extensions import Annotated
from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Exactly ten ASCII digits
MOBILE_PATTERN = r"^[0-9]{10}$"
MOBILE_MESSAGE = "Please enter a valid 10-digit mobile number"

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
MobileNumber = Annotated[str, StringConstraints(pattern=MOBILE_PATTERN)]


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataResponse(BaseModel, Generic[T]):
    """Envelope for single-entity reads."""
    success: bool = True
    data: T


class MutationResponse(BaseModel, Generic[T]):
    """Envelope for create/update responses."""
    success: bool = True
    message: str
    data: T


class ListResponse(BaseModel, Generic[T]):
    """Envelope for list responses."""
    success: bool = True
    count: int
    data: List[T]


class DeleteResponse(BaseModel):
    """Envelope for deletions; ``warning`` reports non-fatal cleanup problems."""
    success: bool = True
    message: str
    warning: Optional[str] = None
