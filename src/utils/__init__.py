from .content_validator import ValidationReport, validate_mcqs

__all__ = ["ValidationReport", "validate_mcqs"]
