# stockmeta/schemas/metadata.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # 缺少時由 service 回 invalid_input（400），而非 422
    image_base64: Optional[str] = Field(
        None,
        alias="imageBase64",
        description="base64-encoded image; a data:image/...;base64, prefix is accepted",
    )
    filename: Optional[str] = Field(None, description="original filename, used only as a prompt hint")


class MetadataRecord(BaseModel):
    title: str = Field(..., min_length=1)
    keywords: List[str] = Field(default_factory=list)
    category: int = Field(..., ge=1, le=21)


class CategoryOut(BaseModel):
    id: int
    name: str


class ErrorOut(BaseModel):
    error: str
    details: str


class CsvRow(BaseModel):
    filename: str = Field(..., min_length=1)
    title: str = ""
    keywords: List[str] = Field(default_factory=list)
    category: Optional[int] = None
    releases: str = ""


class CsvExportRequest(BaseModel):
    items: List[CsvRow] = Field(..., min_length=1)
