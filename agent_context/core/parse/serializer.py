from agent_context.models.document import Document, DocumentNode

def render_nodes(nodes: list[DocumentNode], lead: str = "") -> str:
    """
    Serializes nodes back to markdown.

    `lead` is emitted first. A parsed node is followed by the blank lines it had in
    its source, a synthesized node (gap is None) by exactly one blank line. The
    document always ends with a single newline.
    """
    if not nodes:
        return ""

    parts = [lead]
    last = len(nodes) - 1
    for i, node in enumerate(nodes):
        parts.append(node.raw)
        parts.append("\n")
        if i < last:
            parts.append(node.gap if node.gap is not None else "\n")
    return "".join(parts)

def render_document(document: Document) -> str:
    return render_nodes(document.nodes, document.lead)
