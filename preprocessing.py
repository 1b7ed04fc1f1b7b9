"""
Input conditioning for the parse pipeline: normalization and validation
of free text before it is shown to the model.
"""
import re
from typing import NamedTuple, Optional

MIN_LENGTH = 2
MAX_LENGTH = 500

# Not \s: in Python it also matches 0x1C-0x1F, which must be removed, not spaced
_WHITESPACE_RE = re.compile(
    r"[ \t\n\r\f\v\u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]+"
)
# Tab, newline and carriage return are left to the whitespace pass
_CONTROL_RE = re.compile(r"[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]")


class ValidationResult(NamedTuple):
    valid: bool
    error: Optional[str] = None


def normalize_text(text: str) -> str:
    """
    Trim, collapse whitespace runs and drop control characters.
    Punctuation and emoji are user content and are kept.
    """
    processed = text.strip()
    processed = _WHITESPACE_RE.sub(" ", processed)
    processed = _CONTROL_RE.sub("", processed)

    # Removing a control character can leave two spaces side by side
    return _WHITESPACE_RE.sub(" ", processed).strip()


def validate_input(text: str, original_length: Optional[int] = None) -> ValidationResult:
    """
    Validate normalized text. The upper bound is checked against the
    length of the text as the user sent it, when given.
    """
    if not text or not text.strip():
        return ValidationResult(False, "Input text is required.")

    if len(text.strip()) < MIN_LENGTH:
        return ValidationResult(False, f"Input must be at least {MIN_LENGTH} characters.")

    length = original_length if original_length is not None else len(text)
    if length > MAX_LENGTH:
        return ValidationResult(False, f"Input must be at most {MAX_LENGTH} characters.")

    return ValidationResult(True)
