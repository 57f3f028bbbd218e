from pydantic import BaseModel
from agent_context.models.document import MergeOutcome

class InstallRequest(BaseModel):
    packages: list[str] | None = None       # None = every package with context

class InstallResponse(BaseModel):
    installed: list[str]
    missing: list[str] = []

class FileContentResponse(BaseModel):
    package: str
    file_name: str
    content: str

class IndexResponse(BaseModel):
    content: str
    package_count: int
    file_count: int

class MergeRequest(BaseModel):
    dry_run: bool = False

class MergeResponse(BaseModel):
    path: str
    outcome: MergeOutcome
    changed: bool
    written: bool
    text: str
