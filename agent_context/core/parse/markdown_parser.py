import logging
from typing import List, Optional, Tuple, Union
from markdown_it import MarkdownIt
from markdown_it.token import Token
from agent_context.models.document import Document, DocumentNode, NodeKind
from agent_context.errors import DocumentParseError

logger = logging.getLogger(__name__)

BLOCK_KINDS = {
    "heading_open": NodeKind.heading,
    "paragraph_open": NodeKind.paragraph,
    "bullet_list_open": NodeKind.list,
    "ordered_list_open": NodeKind.list,
    "list_item_open": NodeKind.list_item,
}

class MarkdownParser:
    """
    Turns markdown text into a flat, ordered list of top-level DocumentNodes.

    Block boundaries come from the markdown-it token stream (CommonMark), but each
    node keeps the exact source lines of its block so untouched content renders
    back byte-for-byte. Heading nesting is not materialised: a node only records
    its level, scoping is computed later from the flat list.
    """

    def __init__(self):
        self.md = MarkdownIt("commonmark")

    def parse(self, source: Union[str, bytes, None]) -> Document:
        text = self._decode(source)
        if not text.strip():
            return Document()

        # markdown-it normalises line endings before computing line maps
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        lines = text.split("\n")

        try:
            tokens = self.md.parse(text)
        except Exception as e:
            raise DocumentParseError(f"Markdown parsing failed: {e}") from e

        spans = self._fill_uncovered(self._top_level_spans(tokens), lines)
        nodes = []
        for i, (token, inline, start, end) in enumerate(spans):
            # Trailing blank lines belong to the gap, not to the block
            while end > start + 1 and not lines[end - 1].strip():
                end -= 1
            next_start = spans[i + 1][2] if i + 1 < len(spans) else len(lines)
            gap_lines = lines[end:next_start]

            nodes.append(self._build_node(token, inline, "\n".join(lines[start:end]),
                                          "".join(line + "\n" for line in gap_lines)))

        lead = "".join(line + "\n" for line in lines[:spans[0][2]]) if spans else ""

        logger.debug(f"Parsed {len(nodes)} top-level blocks from {len(lines)} lines")
        return Document(nodes=nodes, lead=lead)

    def _decode(self, source: Union[str, bytes, None]) -> str:
        if source is None:
            return ""
        if isinstance(source, bytes):
            try:
                return source.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise DocumentParseError(f"Document is not valid UTF-8: {e}") from e
        try:
            # Lone surrogates survive in str but can never be written back out
            source.encode("utf-8")
        except UnicodeEncodeError as e:
            raise DocumentParseError(f"Document contains unencodable characters: {e}") from e
        return source

    def _top_level_spans(self, tokens: List[Token]) -> List[Tuple[Token, Optional[Token], int, int]]:
        """
        Collects (opening token, inline token, first line, end line) for every block at nesting level 0.
        """
        spans = []
        for idx, token in enumerate(tokens):
            if token.level != 0 or token.nesting == -1 or token.map is None:
                continue
            inline = None
            if token.type == "heading_open" and idx + 1 < len(tokens):
                inline = tokens[idx + 1]
            start, end = token.map
            spans.append((token, inline, start, end))
        return spans

    def _fill_uncovered(self, spans: List[Tuple[Token, Optional[Token], int, int]], lines: List[str]) -> List[Tuple[Optional[Token], Optional[Token], int, int]]:
        """
        Lines that produce no block token (link reference definitions) still have to survive
        a round trip, so each uncovered run of non-blank lines becomes an opaque span.
        """
        filled = []
        cursor = 0
        for span in spans + [(None, None, len(lines), len(lines))]:
            start = span[2]
            region = [i for i in range(cursor, start) if lines[i].strip()]
            if region:
                filled.append((None, None, region[0], region[-1] + 1))
            if span[0] is not None:
                filled.append(span)
            cursor = max(cursor, span[3])
        return filled

    def _build_node(self, token: Optional[Token], inline: Optional[Token], raw: str, gap: str) -> DocumentNode:
        kind = BLOCK_KINDS.get(token.type, NodeKind.other) if token is not None else NodeKind.other
        if kind != NodeKind.heading:
            return DocumentNode(kind=kind, raw=raw, gap=gap)

        level = int(token.tag[1:])  # "h2" -> 2
        content = inline.content if inline is not None else ""
        return DocumentNode(
            kind=kind,
            raw=raw,
            level=level,
            text=normalize_heading_text(content),
            gap=gap
        )

def normalize_heading_text(text: str) -> str:
    """Collapses internal whitespace and trims, so setext and ATX headings compare alike."""
    return " ".join(text.split())

def parse_document(source: Union[str, bytes, None]) -> Document:
    return MarkdownParser().parse(source)
