from pydantic import BaseModel, Field
from typing import List

class SearchResult(BaseModel):
    title: str = Field(min_length=1)
    url: str

class TimestampPage(BaseModel):
    url: str
    title: str = ""
    timestamps: List[str] = Field(default_factory=list, description="Canonical HH:MM:SS markers in page order")

class HealthResponse(BaseModel):
    status: str = "ok"
    source: str

class ErrorResponse(BaseModel):
    error: str
