from enum import Enum
from pydantic import BaseModel, Field

MAX_DESCRIPTION_LENGTH = 200

class PackageSpecification(BaseModel):
    name: str
    version: str
    root: str                        # directory of one top-level package of the distribution

class PackageInfo(BaseModel):
    name: str
    version: str
    path: str                        # the package's context directory

class FragmentSummary(BaseModel):
    title: str
    description: str = ""           # heuristic ones are capped at MAX_DESCRIPTION_LENGTH
    source_path: str

class FileOverride(BaseModel):
    path: str
    title: str = ""
    description: str = ""

class PackageMetadataOverride(BaseModel):
    description: str = ""
    files: list[FileOverride] = Field(default_factory=list)

    def entry_for(self, path: str) -> FileOverride | None:
        for entry in self.files:
            if entry.path == path:
                return entry
        return None

class MetadataStatus(str, Enum):
    loaded = "loaded"
    missing = "missing"
    invalid = "invalid"

class MetadataLoadResult(BaseModel):
    status: MetadataStatus
    metadata: PackageMetadataOverride = Field(default_factory=PackageMetadataOverride)
    error: str | None = None          # reason, only for invalid

    @property
    def loaded(self) -> bool:
        return self.status == MetadataStatus.loaded
