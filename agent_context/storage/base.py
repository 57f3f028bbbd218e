from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional
from agent_context.models.context import PackageSpecification

class PackageSource(ABC):
    @abstractmethod
    def specifications(self) -> Iterator[PackageSpecification]:
        """Yields installed packages in discovery order."""
        pass

class ContextStore(ABC):
    context_path: str          # install root, one directory per package
    metadata_filename: str     # per-package sidecar name

    @abstractmethod
    def install(self, package_name: str, source_path: str) -> str:
        """Copies a package's context directory into the store, returning the installed path."""
        pass

    @abstractmethod
    def collect_groups(self) -> Dict[str, List[str]]:
        """Returns package name -> sorted fragment paths for everything installed."""
        pass

class DocumentStore(ABC):
    @abstractmethod
    def read(self, path: str) -> Optional[bytes]:
        """Raw document bytes, or None when the document does not exist yet."""
        pass

    @abstractmethod
    def write(self, path: str, text: str) -> None:
        pass
