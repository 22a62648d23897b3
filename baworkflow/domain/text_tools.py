"""
Text helpers: user-story template, requirement IDs and line/word utilities.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Union

from .exceptions import InvalidArgumentError

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
URL_PATTERN = re.compile(r"https?://[^\s]+")
TITLE_WORD_PATTERN = re.compile(r"\w\S*")


@dataclass(frozen=True)
class AcceptanceCriterion:
    """A single Given/When/Then criterion."""
    precondition: str
    action: str
    outcome: str

    def format(self) -> str:
        return (
            f"Given that {self.precondition},\n"
            f"When {self.action},\n"
            f"Then {self.outcome}.\n\n"
        )


def format_user_story(
    role: str,
    feature: str,
    business_value: str,
    placement: str,
    visual_type: str,
    behavior: str,
    acceptance_criteria: Union[str, Sequence[AcceptanceCriterion]],
    extra_info: str = ""
) -> str:
    """Render a user story in the standard BA markdown template."""
    story = "**Requirement**\n"
    story += f"As a {role},\n"
    story += f"I want {feature},\n"
    story += f"So that {business_value}.\n\n"

    story += "**Placement on the Page**\n"
    story += f"This feature should be located in {placement}.\n"
    story += f"It should be visually {visual_type}.\n\n"

    story += "**Expected Behavior**\n"
    story += f"{behavior}\n\n"

    if extra_info and extra_info.strip():
        story += "**Extra Information**\n"
        story += f"{extra_info}\n\n"

    story += "**Acceptance Criteria**\n"
    if isinstance(acceptance_criteria, str):
        story += f"{acceptance_criteria}\n"
    else:
        story += "".join(criterion.format() for criterion in acceptance_criteria)

    return story


def generate_requirement_ids(prefix: str, start_number: int, count: int, padding: int = 3) -> List[str]:
    """
    Generate sequential, zero-padded requirement IDs.

    Example: ("REQ", 1, 3) -> ["REQ-001", "REQ-002", "REQ-003"]
    """
    if count < 0:
        raise InvalidArgumentError(f"count must not be negative, got {count}")
    if padding < 0:
        raise InvalidArgumentError(f"padding must not be negative, got {padding}")

    return [
        f"{prefix}-{str(start_number + offset).zfill(padding)}"
        for offset in range(count)
    ]


def _title_case(text: str) -> str:
    return TITLE_WORD_PATTERN.sub(lambda match: match.group(0)[0].upper() + match.group(0)[1:].lower(), text)


def _sort_lines(text: str, reverse: bool) -> str:
    return "\n".join(sorted(text.split("\n"), reverse=reverse))


TEXT_OPERATIONS: Dict[str, Callable[[str, bool], Union[int, str]]] = {
    "word_count": lambda text, reverse: len(text.split()),
    "char_count": lambda text, reverse: len(text),
    "remove_duplicates": lambda text, reverse: "\n".join(dict.fromkeys(text.split("\n"))),
    "sort_lines": _sort_lines,
    "extract_emails": lambda text, reverse: "\n".join(EMAIL_PATTERN.findall(text)),
    "extract_urls": lambda text, reverse: "\n".join(URL_PATTERN.findall(text)),
    "to_uppercase": lambda text, reverse: text.upper(),
    "to_lowercase": lambda text, reverse: text.lower(),
    "to_title_case": lambda text, reverse: _title_case(text),
    "trim_whitespace": lambda text, reverse: "\n".join(line.strip() for line in text.split("\n")),
    "add_line_numbers": lambda text, reverse: "\n".join(
        f"{number}. {line}" for number, line in enumerate(text.split("\n"), 1)
    ),
}


def perform_text_operation(operation: str, text: str, reverse: bool = False) -> Union[int, str]:
    """
    Apply a named text operation.

    Counting operations return an int, everything else returns text.

    Raises:
        InvalidArgumentError: If the operation name is unknown
    """
    handler = TEXT_OPERATIONS.get(operation)
    if handler is None:
        raise InvalidArgumentError(
            f"Unknown text operation '{operation}'. "
            f"Choose one of: {', '.join(TEXT_OPERATIONS)}"
        )
    return handler(text, reverse)
