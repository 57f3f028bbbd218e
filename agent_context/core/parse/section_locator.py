from typing import List, Optional, Tuple
from agent_context.models.document import DocumentNode
from agent_context.core.parse.markdown_parser import normalize_heading_text

def headings_match(node: DocumentNode, text: str, level: int) -> bool:
    """Case-insensitive, whitespace-trimmed text match at exactly the given level."""
    if not node.is_heading or node.level != level:
        return False
    return normalize_heading_text(node.text or "").casefold() == normalize_heading_text(text).casefold()

def find_heading(nodes: List[DocumentNode],
                 text: str,
                 level: int,
                 begin: int = 0,
                 end: Optional[int] = None) -> Optional[int]:
    """
    Returns the index of the first heading in nodes[begin:end] matching text and level.
    """
    end = len(nodes) if end is None else end
    for i in range(begin, end):
        if headings_match(nodes[i], text, level):
            return i
    return None

def section_span(nodes: List[DocumentNode],
                 start: int,
                 threshold: int,
                 limit: Optional[int] = None) -> Tuple[int, int]:
    """
    Content span owned by the node at `start`.

    The span runs from start + 1 up to, not including, the next heading whose level is
    <= threshold, or to `limit` (default: end of nodes), whichever comes first.
    An empty span is returned as (start + 1, start + 1).
    """
    limit = len(nodes) if limit is None else min(limit, len(nodes))
    begin = start + 1
    for i in range(begin, limit):
        node = nodes[i]
        if node.is_heading and node.level is not None and node.level <= threshold:
            return begin, i
    return begin, max(begin, limit)
