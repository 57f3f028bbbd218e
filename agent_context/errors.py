class AgentContextError(Exception):
    """Base class for failures surfaced by agent-context."""


class DocumentParseError(AgentContextError):
    """The target document could not be turned into nodes. Nothing is written."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class GeneratedBlockError(AgentContextError):
    """The generated block would escape the section it is merged into."""


class DocumentWriteError(AgentContextError):
    """The merged document could not be written; the previous file is left as it was."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"Could not write {path}: {cause}")
        self.path = path
        self.cause = cause
