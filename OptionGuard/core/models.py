import uuid
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

Operation = Literal["create", "update"]


class Violation(BaseModel):
    kind: str  # "size_limit_exceeded", "missing_prior_create", "autoload_limit_exceeded"
    key: str
    message: str
    size: Optional[int] = None
    limit: Optional[int] = None


class CheckRequest(BaseModel):
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    key: str
    value: Any = None
    operation: Operation = "create"
    autoload: Optional[bool] = None


class CheckResponse(BaseModel):
    request_id: str
    verdict: str  # "allow", "block"
    violations: List[Violation]


class OptionWrite(BaseModel):
    value: Any = None
    autoload: Optional[bool] = None


class OptionResponse(BaseModel):
    key: str
    value: Any = None
    changed: bool = True
