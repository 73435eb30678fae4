"""File validation utilities for document uploads

Validation is a pure precondition check: no I/O, no side effects. It runs
before the blob store is touched so a rejected upload never writes bytes.
"""

from dataclasses import dataclass
import os
from pathlib import Path
import re
from typing import Optional, Tuple
import unicodedata
from urllib.parse import quote

from .errors import ValidationError


# Supported MIME types
SUPPORTED_MIME_TYPES = {
    'application/pdf',
    'image/jpeg',
    'image/jpg',
    'image/png',
    'application/msword',  # .doc
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',  # .docx
}

# 10 MB ceiling, overridable through MAX_UPLOAD_SIZE_BYTES
MAX_FILE_SIZE = 10_000_000

DEFAULT_LEGACY_TYPE = 'general'

_EXTENSION_RE = re.compile(r'^\.[A-Za-z0-9]{1,10}$')


@dataclass(frozen=True)
class InboundFile:
    """An uploaded file as received from the client.

    Attributes:
        filename: Original file name as sent by the client
        content_type: Declared MIME type
        content: Full file body
    """
    filename: str
    content_type: str
    content: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.content)


def is_supported_mime_type(mime_type: Optional[str]) -> bool:
    """Check if MIME type is supported for upload

    Example:
        >>> is_supported_mime_type('application/pdf')
        True
        >>> is_supported_mime_type('text/csv')
        False
    """
    return mime_type in SUPPORTED_MIME_TYPES


def validate_file_size(size_bytes: int, max_size: Optional[int] = None) -> Tuple[bool, Optional[str]]:
    """Validate file size is within limits

    Args:
        size_bytes: File size in bytes
        max_size: Maximum allowed size (defaults to MAX_FILE_SIZE)

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> validate_file_size(1024)
        (True, None)
        >>> validate_file_size(0)
        (False, 'File is empty (0 bytes)')
    """
    if max_size is None:
        max_size = MAX_FILE_SIZE

    if size_bytes == 0:
        return False, "File is empty (0 bytes)"

    if size_bytes > max_size:
        return False, f"File size too large: maximum is {max_size} bytes (got {size_bytes} bytes)"

    return True, None


def validate_filename(filename: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate the original filename

    The name is stored verbatim and only echoed back in headers; storage
    paths never derive from it, so separators are allowed here.

    Example:
        >>> validate_filename('marksheet.pdf')
        (True, None)
        >>> validate_filename('')
        (False, 'Filename cannot be empty')
    """
    if not filename or len(filename.strip()) == 0:
        return False, "Filename cannot be empty"

    if len(filename) > 255:
        return False, f"Filename exceeds 255 characters (got {len(filename)})"

    if any(ord(c) < 32 for c in filename):
        return False, "Filename contains control characters"

    return True, None


def validate_required_field(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a required descriptive form field is present and non-blank."""
    if value is None or not value.strip():
        return False, f"Document {name} is required"
    return True, None


def validate_upload(
    file: Optional[InboundFile],
    display_name: Optional[str],
    purpose: Optional[str],
    category: Optional[str],
    max_size: Optional[int] = None,
) -> None:
    """Run every upload precondition, raising on the first failure

    Raises:
        ValidationError: With a message the client can act on
    """
    if file is None:
        raise ValidationError("No file uploaded")

    for field_name, value in (("name", display_name), ("purpose", purpose), ("type", category)):
        is_valid, error_msg = validate_required_field(field_name, value)
        if not is_valid:
            raise ValidationError(error_msg)

    is_valid, error_msg = validate_filename(file.filename)
    if not is_valid:
        raise ValidationError(error_msg)

    if not is_supported_mime_type(file.content_type):
        raise ValidationError(
            f"File type not allowed: {file.content_type}. "
            f"Supported types: PDF, JPEG, PNG, Word (.doc, .docx)"
        )

    is_valid, error_msg = validate_file_size(file.size_bytes, max_size)
    if not is_valid:
        raise ValidationError(error_msg)


def safe_extension(filename: str) -> str:
    """Extension used for the stored blob name, or '' if it looks unsafe

    Example:
        >>> safe_extension('Marksheet.PDF')
        '.pdf'
        >>> safe_extension('evil.p/../df')
        ''
    """
    ext = Path(filename).suffix
    if not _EXTENSION_RE.match(ext):
        return ''
    return ext.lower()


def _ascii_header_text(text: str) -> str:
    text = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    return re.sub(r'["\\\x00-\x1f\x7f]', '_', text)


def content_disposition(disposition: str, filename: str) -> str:
    """Build a Content-Disposition value that is safe for any original name

    Header values go out as latin-1, so the quoted filename carries an ASCII
    fallback and names that need more get an RFC 5987 filename* parameter
    with the UTF-8 form.

    Example:
        >>> content_disposition('attachment', 'marksheet.pdf')
        'attachment; filename="marksheet.pdf"'
        >>> content_disposition('inline', 'résumé.pdf')
        'inline; filename="resume.pdf"; filename*=UTF-8\\'\\'r%C3%A9sum%C3%A9.pdf'
    """
    name = Path(filename).name if filename else ''
    stem, ext = os.path.splitext(name)
    fallback = (_ascii_header_text(stem).strip() or 'document') + _ascii_header_text(ext)

    header = f'{disposition}; filename="{fallback}"'
    if name and fallback != name:
        header += f"; filename*=UTF-8''{quote(name, safe='')}"
    return header
