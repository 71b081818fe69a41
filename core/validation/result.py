# core/validation/result.py
from typing import NamedTuple, Optional

class ValidationResult(NamedTuple):
    valid: bool
    error: Optional[str] = None

VALID = ValidationResult(True)

def invalid(error: str) -> ValidationResult:
    return ValidationResult(False, error)
