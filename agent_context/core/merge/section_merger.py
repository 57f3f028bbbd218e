import logging
from typing import List, Optional, Union
from agent_context.models.document import DocumentNode, MergeOutcome, MergeResult, SectionSpec
from agent_context.core.parse.markdown_parser import MarkdownParser
from agent_context.core.parse.section_locator import find_heading, section_span
from agent_context.core.parse.serializer import render_nodes
from agent_context.errors import GeneratedBlockError

logger = logging.getLogger(__name__)

class SectionMerger:
    """
    Splices a generated markdown block into one heading-scoped section of a document.

    A section is a heading plus every node up to the next heading of equal or higher
    rank (level <= its own). Only the target section's span is rebuilt; every other
    node, including its trailing blank lines, is carried over untouched and in order.

    States:
    1. No document          -> anchor + section + block.
    2. No anchor heading    -> anchor + section + block inserted at the document root.
    3. Anchor, no section   -> section + block inserted as the anchor's first subsection.
    4. Anchor and section   -> the section's span is replaced by the block.
    """

    def __init__(self, spec: Optional[SectionSpec] = None, parser: Optional[MarkdownParser] = None):
        self.spec = spec or SectionSpec()
        self.parser = parser or MarkdownParser()

    def merge(self, existing: Union[str, bytes, None], generated_block: str) -> MergeResult:
        # Parse everything up front: any failure leaves nothing half-built
        document = self.parser.parse(existing)
        block = self._parse_block(generated_block)
        source_text = self._source_text(existing)
        lead = document.lead

        if not document.nodes:
            nodes = [self._anchor_node(), self._section_node()] + block
            return self._result(MergeOutcome.created, nodes, source_text)

        if not self.spec.is_nested:
            return self._merge_at_root(document.nodes, block, source_text, lead)

        nodes = list(document.nodes)
        anchor = find_heading(nodes, self.spec.anchor_heading_text, self.spec.anchor_level)
        if anchor is None:
            # Land in front of the first section-level heading so leading prose is not absorbed
            _, at = section_span(nodes, -1, self.spec.section_level)
            inserted = [self._anchor_node(), self._section_node()] + block
            logger.info(f"Anchor heading '{self.spec.anchor_heading_text}' not found, inserting at node {at}")
            return self._result(MergeOutcome.anchor_inserted, self._splice(nodes, at, at, inserted), source_text, lead)

        run_begin, run_end = section_span(nodes, anchor, self.spec.anchor_level)
        section = find_heading(nodes, self.spec.section_heading_text, self.spec.section_level, run_begin, run_end)
        if section is None:
            _, at = section_span(nodes, anchor, self.spec.section_level, limit=run_end)
            inserted = [self._section_node()] + block
            logger.info(f"Section '{self.spec.section_heading_text}' not found under anchor, inserting at node {at}")
            return self._result(MergeOutcome.section_inserted, self._splice(nodes, at, at, inserted), source_text, lead)

        begin, end = section_span(nodes, section, self.spec.section_level, limit=run_end)
        logger.info(f"Replacing {end - begin} node(s) in section '{self.spec.section_heading_text}'")
        return self._result(MergeOutcome.section_replaced, self._splice(nodes, begin, end, block), source_text, lead)

    def _merge_at_root(self,
                       nodes: List[DocumentNode],
                       block: List[DocumentNode],
                       source_text: str,
                       lead: str) -> MergeResult:
        logger.warning(
            f"Section level {self.spec.section_level} is not below anchor level {self.spec.anchor_level}; "
            "merging at the document root"
        )
        nodes = list(nodes)
        section = find_heading(nodes, self.spec.section_heading_text, self.spec.section_level)
        if section is None:
            _, at = section_span(nodes, -1, self.spec.section_level)
            inserted = [self._section_node()] + block
            return self._result(MergeOutcome.section_inserted, self._splice(nodes, at, at, inserted), source_text, lead)

        begin, end = section_span(nodes, section, self.spec.section_level)
        return self._result(MergeOutcome.section_replaced, self._splice(nodes, begin, end, block), source_text, lead)

    def _parse_block(self, generated_block: str) -> List[DocumentNode]:
        nodes = self.parser.parse(generated_block or "").nodes
        for node in nodes:
            if node.is_heading and node.level <= self.spec.section_level:
                raise GeneratedBlockError(
                    f"Generated block heading '{node.text}' (level {node.level}) would end the "
                    f"'{self.spec.section_heading_text}' section (level {self.spec.section_level})"
                )
        return nodes

    def _splice(self, nodes: List[DocumentNode], begin: int, end: int, inserted: List[DocumentNode]) -> List[DocumentNode]:
        """
        Replaces nodes[begin:end] with `inserted`. Nodes meeting across the seam get at least one
        blank line between them; everything else keeps its original spacing.
        """
        result = nodes[:begin] + inserted + nodes[end:]
        seams = [begin - 1, begin + len(inserted) - 1]
        for i in seams:
            if 0 <= i < len(result) - 1 and not result[i].gap:
                result[i] = result[i].model_copy(update={"gap": None})
        return result

    def _anchor_node(self) -> DocumentNode:
        return DocumentNode.heading(self.spec.anchor_heading_text, self.spec.anchor_level)

    def _section_node(self) -> DocumentNode:
        return DocumentNode.heading(self.spec.section_heading_text, self.spec.section_level)

    def _source_text(self, existing: Union[str, bytes, None]) -> str:
        if existing is None:
            return ""
        if isinstance(existing, bytes):
            return existing.decode("utf-8-sig")
        return existing

    def _result(self, outcome: MergeOutcome, nodes: List[DocumentNode], source_text: str, lead: str = "") -> MergeResult:
        text = render_nodes(nodes, lead)
        return MergeResult(outcome=outcome, text=text, changed=text != source_text)

def merge(existing: Union[str, bytes, None], spec: SectionSpec, generated_block: str) -> str:
    """Returns the updated document text; raises DocumentParseError or GeneratedBlockError."""
    return SectionMerger(spec).merge(existing, generated_block).text
