"""File descriptors and validation rule sets for uploaded evidence."""

from typing import List, Optional

from pydantic import BaseModel, Field


class FileDescriptor(BaseModel):
    """An uploaded file as described by the caller. Contents are never read."""

    mime_type: str                          # e.g., "application/pdf"
    size_bytes: int = Field(ge=0)
    name: str = ""


class FileValidationRuleSet(BaseModel):
    """Allowed MIME types and size bounds for one evidence category."""

    allowed_types: List[str]                # Ordered; drives the error message
    max_size_bytes: int = Field(gt=0)
    min_size_bytes: Optional[int] = None


class FileValidationResult(BaseModel):
    is_valid: bool
    error: Optional[str] = None
    file_type: str
    file_size: int


class InvalidFile(BaseModel):
    file: FileDescriptor
    error: str


class EvidenceFilePartition(BaseModel):
    """Files split into accepted and rejected, each in input order."""

    valid: List[FileDescriptor] = []
    invalid: List[InvalidFile] = []
