from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field


class ConvertedFile(BaseModel):
    sha256: str
    format: str = Field(examples=["json"])
    media_type: str = Field(examples=["application/json"])
    content_b64: str


class ConvertSummary(BaseModel):
    rows: int = 0
    columns: int = 0
    input_format: Optional[str] = Field(default=None, examples=["xml"])


class ConvertResponse(BaseModel):
    output: ConvertedFile
    summary: ConvertSummary


class HealthResponse(BaseModel):
    ok: bool = True
