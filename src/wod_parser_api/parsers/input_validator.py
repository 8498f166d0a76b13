"""
Input validation

Cheap checks run on raw text before the pipeline. Only empty input blocks a
parse; everything else is reported as an advisory warning.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List

from .issues import ErrorCode, MAX_INPUT_LENGTH, MIN_INPUT_LENGTH, make_issue
from .models import IssueSeverity, ParsingIssue

logger = logging.getLogger(__name__)

# C0 controls other than tab/newline/carriage return, plus DEL
RE_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
RE_DIGIT = re.compile(r"\d")

# Share of control characters above which the text is treated as binary
BINARY_CONTROL_RATIO = 0.1


@dataclass
class InputCheck:
    sanitized_text: str
    issues: List[ParsingIssue] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.sanitized_text.strip()


def check_input(text: str, max_length: int = MAX_INPUT_LENGTH) -> InputCheck:
    """
    Sanitize raw text and collect input-level issues.

    Args:
        text: Raw workout text, possibly None or whitespace only
        max_length: Length above which an InputTooLong warning is raised

    Returns:
        InputCheck with control characters removed
    """
    raw = text or ""
    issues: List[ParsingIssue] = []

    control_count = len(RE_CONTROL_CHARS.findall(raw))
    if control_count and ("\x00" in raw or control_count / len(raw) > BINARY_CONTROL_RATIO):
        logger.warning(f"Input contains {control_count} control characters")
        issues.append(make_issue(ErrorCode.BINARY_CONTENT, IssueSeverity.WARNING))
    sanitized = RE_CONTROL_CHARS.sub("", raw)

    if not sanitized.strip():
        return InputCheck(sanitized, [make_issue(ErrorCode.EMPTY_INPUT)])

    if len(sanitized) > max_length:
        issues.append(make_issue(ErrorCode.INPUT_TOO_LONG, IssueSeverity.WARNING, limit=max_length))

    stripped = sanitized.strip()
    if len(stripped) < MIN_INPUT_LENGTH:
        issues.append(make_issue(ErrorCode.INPUT_TOO_SHORT, IssueSeverity.WARNING, original_text=stripped))

    if not RE_DIGIT.search(stripped):
        issues.append(make_issue(ErrorCode.NO_NUMBERS, IssueSeverity.WARNING))

    return InputCheck(sanitized, issues)
