from enum import Enum
from pydantic import BaseModel, Field

class NodeKind(str, Enum):
    heading = "heading"
    paragraph = "paragraph"
    list = "list"
    list_item = "list_item"
    other = "other"

class DocumentNode(BaseModel):
    kind: NodeKind
    raw: str                          # verbatim block source, no trailing newline
    level: int | None = None          # 1..6, headings only
    text: str | None = None           # normalized inline text, headings only
    gap: str | None = None            # blank lines that followed the block; None = one blank line

    @property
    def is_heading(self) -> bool:
        return self.kind == NodeKind.heading

    @classmethod
    def heading(cls, text: str, level: int) -> "DocumentNode":
        text = text.strip()
        return cls(kind=NodeKind.heading, raw=f"{'#' * level} {text}", level=level, text=text)

class Document(BaseModel):
    nodes: list[DocumentNode] = Field(default_factory=list)
    lead: str = ""                     # blank lines before the first block, verbatim

    def __len__(self) -> int:
        return len(self.nodes)

class SectionSpec(BaseModel):
    anchor_heading_text: str = "Agent"
    anchor_level: int = Field(default=1, ge=1, le=6)
    section_heading_text: str = "Context"
    section_level: int = Field(default=2, ge=1, le=6)

    @property
    def is_nested(self) -> bool:
        return self.section_level > self.anchor_level

class MergeOutcome(str, Enum):
    created = "created"
    anchor_inserted = "anchor_inserted"
    section_inserted = "section_inserted"
    section_replaced = "section_replaced"

class MergeResult(BaseModel):
    outcome: MergeOutcome
    text: str
    changed: bool = True
    path: str | None = None
