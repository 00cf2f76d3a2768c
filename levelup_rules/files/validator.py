"""
File Validator — MIME type and size checks for uploaded evidence.

Behavioral Contract:
- Checks run in a fixed order and the first failure wins:
  type, then maximum size, then minimum size, then emptiness
- Exactly one reason is reported per file
- Nothing is coerced: a rejected file stays rejected
- Batch helpers preserve input order and never short-circuit
"""

from typing import Dict, List

from levelup_rules.models.files import (
    EvidenceFilePartition,
    FileDescriptor,
    FileValidationResult,
    FileValidationRuleSet,
    InvalidFile,
)
from levelup_rules.observability.logging import get_logger
from levelup_rules.rounding import round_half_up

logger = get_logger(__name__)

KB = 1024
MB = 1024 * 1024

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PNG = "image/png"
JPEG = "image/jpeg"
JPG = "image/jpg"

FILE_VALIDATION_RULES: Dict[str, FileValidationRuleSet] = {
    "resume": FileValidationRuleSet(
        allowed_types=[PDF, DOCX],
        max_size_bytes=5 * MB,
        min_size_bytes=1 * KB,
    ),
    "coverLetter": FileValidationRuleSet(
        allowed_types=[PDF, DOCX],
        max_size_bytes=5 * MB,
        min_size_bytes=1 * KB,
    ),
    "screenshot": FileValidationRuleSet(
        allowed_types=[PNG, JPEG, JPG],
        max_size_bytes=10 * MB,
        min_size_bytes=1 * KB,
    ),
    "document": FileValidationRuleSet(
        allowed_types=[PDF, DOCX, PNG, JPEG, JPG],
        max_size_bytes=10 * MB,
        min_size_bytes=1 * KB,
    ),
}

# Evidence type aliases (lower-cased) -> rule set name; anything else is "document"
_RULE_ALIASES: Dict[str, str] = {
    "resume": "resume",
    "cv": "resume",
    "cover_letter": "coverLetter",
    "coverletter": "coverLetter",
    "screenshot": "screenshot",
    "image": "screenshot",
}

MIME_TO_EXTENSION: Dict[str, str] = {
    PDF: ".pdf",
    DOCX: ".docx",
    PNG: ".png",
    JPEG: ".jpg",
    JPG: ".jpg",
}

EXTENSION_TO_MIME: Dict[str, str] = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".doc": DOCX,
    ".png": PNG,
    ".jpg": JPEG,
    ".jpeg": JPEG,
}

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def _allowed_extensions(rules: FileValidationRuleSet) -> str:
    extensions = [MIME_TO_EXTENSION[t] for t in rules.allowed_types if t in MIME_TO_EXTENSION]
    return ", ".join(extensions)


def _rejected(file: FileDescriptor, error: str) -> FileValidationResult:
    logger.debug("file_rejected", file_name=file.name, mime_type=file.mime_type, error=error)
    return FileValidationResult(
        is_valid=False,
        error=error,
        file_type=file.mime_type,
        file_size=file.size_bytes,
    )


def validate_file(file: FileDescriptor, rules: FileValidationRuleSet) -> FileValidationResult:
    """Validate one file against a rule set. See module contract for check order."""
    if file.mime_type not in rules.allowed_types:
        return _rejected(
            file,
            f"File type not allowed. Supported formats: {_allowed_extensions(rules)}",
        )

    if file.size_bytes > rules.max_size_bytes:
        max_size_mb = round_half_up(rules.max_size_bytes / MB)
        return _rejected(file, f"File size too large. Maximum allowed: {max_size_mb}MB")

    # A zero minimum is the same as no minimum
    if rules.min_size_bytes and file.size_bytes < rules.min_size_bytes:
        min_size_kb = round_half_up(rules.min_size_bytes / KB)
        return _rejected(file, f"File size too small. Minimum required: {min_size_kb}KB")

    if file.size_bytes == 0:
        return _rejected(file, "File appears to be empty")

    return FileValidationResult(
        is_valid=True,
        file_type=file.mime_type,
        file_size=file.size_bytes,
    )


def validate_files(
    files: List[FileDescriptor],
    rules: FileValidationRuleSet,
) -> List[FileValidationResult]:
    return [validate_file(f, rules) for f in files]


def get_validation_rules(evidence_type: str) -> FileValidationRuleSet:
    """Case-insensitive rule set lookup; unknown types get the document rules."""
    name = _RULE_ALIASES.get(evidence_type.lower(), "document")
    return FILE_VALIDATION_RULES[name]


def validate_file_extension(file_name: str, mime_type: str) -> bool:
    """True when the file name's extension maps to the declared MIME type."""
    dot = file_name.rfind(".")
    extension = file_name.lower()[dot:] if dot >= 0 else file_name.lower()
    return EXTENSION_TO_MIME.get(extension) == mime_type


def format_file_size(size_bytes: int) -> str:
    if size_bytes == 0:
        return "0 B"

    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and size_bytes >= KB ** (exponent + 1):
        exponent += 1
    value = float(f"{size_bytes / KB ** exponent:.1f}")
    return f"{value:g} {_SIZE_UNITS[exponent]}"


def validate_evidence_files(
    files: List[FileDescriptor],
    evidence_type: str,
) -> EvidenceFilePartition:
    """Split files into valid and invalid for an evidence type, keeping input order."""
    rules = get_validation_rules(evidence_type)
    partition = EvidenceFilePartition()

    for file, result in zip(files, validate_files(files, rules)):
        if result.is_valid:
            partition.valid.append(file)
        else:
            partition.invalid.append(
                InvalidFile(file=file, error=result.error or "Unknown validation error")
            )

    return partition
