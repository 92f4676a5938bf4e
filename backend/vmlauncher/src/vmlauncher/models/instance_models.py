from pydantic import BaseModel, Field
from typing import Optional


class InstanceOperationResponse(BaseModel):
    operation: str = Field(..., description="create or delete")
    status: str = "done"
    project: Optional[str] = None
    zone: Optional[str] = None
    instance: Optional[str] = None


class ErrorDetail(BaseModel):
    error: str


class ErrorResponse(BaseModel):
    detail: ErrorDetail
