# -*- coding: utf-8 -*-
"""
MCQ Markup Validator
====================

Structural checks for ``<mcq>`` blocks in generated markdown:

    <mcq question="..." subject="..." explanation="..." difficultyScore="7">
    <option correct="true">...</option>
    <option>...</option>
    <option>...</option>
    <option>...</option>
    </mcq>

Each block must carry a ``difficultyScore`` attribute, exactly four
``<option>`` tags and exactly one option marked ``correct="true"``. Text with
no MCQ blocks is valid.
"""

from dataclasses import dataclass, field
import re

# Quoted attribute values may contain '>'
_ATTRS = r"""((?:[^>"']|"[^"]*"|'[^']*')*)"""

_MCQ_BLOCK_RE = re.compile(r"<mcq\b" + _ATTRS + r">(.*?)</mcq\s*>", re.DOTALL | re.IGNORECASE)
_OPTION_RE = re.compile(r"<option\b" + _ATTRS + r">", re.IGNORECASE)
_QUESTION_ATTR_RE = re.compile(r"""\bquestion\s*=\s*["']""", re.IGNORECASE)
_DIFFICULTY_ATTR_RE = re.compile(r"""\bdifficultyScore\s*=\s*["']\s*[^"'\s]""", re.IGNORECASE)
_CORRECT_ATTR_RE = re.compile(r"""\bcorrect\s*=\s*["']\s*true\s*["']""", re.IGNORECASE)


@dataclass
class ValidationReport:
    valid: bool = True
    errors: list[str] = field(default_factory=list)


def validate_mcqs(text: str) -> ValidationReport:
    """
    Validate every ``<mcq question=...>`` block in ``text``.

    Args:
        text: Markdown that may contain MCQ markup

    Returns:
        ValidationReport; ``valid`` is True exactly when ``errors`` is empty
    """
    errors: list[str] = []
    index = 0

    for match in _MCQ_BLOCK_RE.finditer(text or ""):
        attrs, body = match.group(1), match.group(2)
        if not _QUESTION_ATTR_RE.search(attrs):
            continue
        index += 1

        if not _DIFFICULTY_ATTR_RE.search(attrs):
            errors.append(f"MCQ {index}: missing difficultyScore attribute")

        options = _OPTION_RE.findall(body)
        if len(options) != 4:
            errors.append(f"MCQ {index}: expected 4 <option> tags, found {len(options)}")

        correct = sum(1 for option_attrs in options if _CORRECT_ATTR_RE.search(option_attrs))
        if correct != 1:
            errors.append(f"MCQ {index}: expected exactly one correct option, found {correct}")

    return ValidationReport(valid=not errors, errors=errors)


__all__ = ["ValidationReport", "validate_mcqs"]
