"""Error envelope shared by every failing response."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    errors: list[str] = Field(..., description="One client-safe message per problem")
