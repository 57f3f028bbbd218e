from enum import Enum
from typing import Iterable, Tuple
from agent_context.models.context import MAX_DESCRIPTION_LENGTH

DEFAULT_TITLE = "Documentation"
ELLIPSIS = "..."

class ScanState(str, Enum):
    before_content = "before_content"
    in_paragraph = "in_paragraph"

def _is_heading(line: str) -> bool:
    return line.startswith("#")

def extract_title(lines: Iterable[str]) -> str:
    """
    Text of the first heading line with its '#' markers removed, or DEFAULT_TITLE.
    """
    for line in lines:
        line = line.strip()
        if _is_heading(line):
            return line.lstrip("#").strip()
    return DEFAULT_TITLE

def extract_description(lines: Iterable[str]) -> str:
    """
    First paragraph of body text, space-joined and capped at MAX_DESCRIPTION_LENGTH.

    Heading lines are skipped wherever they appear. Leading blank lines are skipped,
    and the first blank line after some content closes the paragraph.
    """
    state = ScanState.before_content
    collected = []

    for line in lines:
        line = line.strip()
        if _is_heading(line):
            continue

        if state == ScanState.before_content:
            if not line:
                continue
            state = ScanState.in_paragraph
        elif not line:
            break

        collected.append(line)

    description = " ".join(collected).strip()
    limit = MAX_DESCRIPTION_LENGTH - len(ELLIPSIS)
    if len(description) > limit:
        description = description[:limit] + ELLIPSIS
    return description

class FragmentSummarizer:
    """
    Heuristic (title, description) extraction for one documentation fragment.
    Pure text processing: no I/O, never fails.
    """

    def summarize(self, raw_text: str) -> Tuple[str, str]:
        lines = (raw_text or "").splitlines()
        return extract_title(lines), extract_description(lines)

def summarize(raw_text: str) -> Tuple[str, str]:
    return FragmentSummarizer().summarize(raw_text)
