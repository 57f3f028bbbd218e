import logging
import os
from typing import List, Optional
from agent_context.models.context import PackageInfo
from agent_context.storage.base import ContextStore, PackageSource
from agent_context.storage.context_store import LocalContextStore
from agent_context.storage.package_source import InstalledPackageSource

logger = logging.getLogger(__name__)

# Extensions tried, in order, when a fragment is requested without one
FRAGMENT_EXTENSIONS = ["", ".mdc", ".md"]

class ContextHelper:
    """
    Finds installed packages that ship a context directory and copies their
    fragments into the local context store.

    A package that is not installed, or has no context directory, is reported as
    None / False rather than raised, so batch operations carry on with the rest.
    """

    def __init__(self,
                 source: Optional[PackageSource] = None,
                 store: Optional[ContextStore] = None,
                 source_directory: str = "context"):
        self.source = source or InstalledPackageSource()
        self.store = store or LocalContextStore()
        self.source_directory = source_directory

    def find_packages_with_context(self) -> List[PackageInfo]:
        packages = []
        seen = set()
        for spec in self.source.specifications():
            if spec.name in seen:
                continue
            context_path = os.path.join(spec.root, self.source_directory)
            if os.path.isdir(context_path):
                seen.add(spec.name)
                packages.append(PackageInfo(name=spec.name, version=spec.version, path=context_path))
        return packages

    def find_package_with_context(self, package_name: str) -> Optional[PackageInfo]:
        for package in self.find_packages_with_context():
            if package.name == package_name:
                return package
        return None

    def list_context_files(self, package_name: str) -> Optional[List[str]]:
        package = self.find_package_with_context(package_name)
        if package is None:
            return None

        files = []
        for root, _, names in os.walk(package.path):
            files.extend(os.path.join(root, name) for name in names)
        return sorted(files)

    def show_context_file(self, package_name: str, file_name: str) -> Optional[str]:
        package = self.find_package_with_context(package_name)
        if package is None:
            return None

        base = os.path.realpath(package.path)
        for extension in FRAGMENT_EXTENSIONS:
            candidate = os.path.realpath(os.path.join(base, file_name + extension))
            # Names that climb out of the context directory are simply not found
            if os.path.commonpath([base, candidate]) != base:
                return None
            if os.path.isfile(candidate):
                with open(candidate, "r", encoding="utf-8") as f:
                    return f.read()
        return None

    def install_package_context(self, package_name: str) -> bool:
        package = self.find_package_with_context(package_name)
        if package is None:
            logger.warning(f"No context found for package {package_name}")
            return False
        self.store.install(package.name, package.path)
        return True

    def install_all_context(self) -> List[str]:
        installed = []
        for package in self.find_packages_with_context():
            try:
                self.store.install(package.name, package.path)
            except OSError as e:
                logger.warning(f"Failed to install context for {package.name}: {e}")
                continue
            installed.append(package.name)
        return installed
