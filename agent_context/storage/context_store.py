import os
import shutil
import logging
from typing import Dict, List
from agent_context.storage.base import ContextStore

logger = logging.getLogger(__name__)

class LocalContextStore(ContextStore):
    """
    Implements ContextStore on the local disk.
    - One directory per package under context_path, holding its copied fragments.
    - An optional metadata sidecar at the root of each package directory.
    """

    def __init__(self, context_path: str = ".context", metadata_filename: str = "index.yaml"):
        self.context_path = context_path
        self.metadata_filename = metadata_filename

    def install(self, package_name: str, source_path: str) -> str:
        target_path = os.path.join(self.context_path, package_name)
        os.makedirs(target_path, exist_ok=True)
        # Merges into an existing copy, overwriting files with the same name
        shutil.copytree(source_path, target_path, dirs_exist_ok=True)
        logger.info(f"Installed context for {package_name} into {target_path}")
        return target_path

    def installed_packages(self) -> List[str]:
        if not os.path.isdir(self.context_path):
            return []
        return sorted(
            name for name in os.listdir(self.context_path)
            if os.path.isdir(os.path.join(self.context_path, name))
        )

    def list_files(self, package_name: str) -> List[str]:
        package_path = os.path.join(self.context_path, package_name)
        files = []
        for root, dirs, names in os.walk(package_path):
            dirs[:] = [d for d in dirs if not d.startswith(".")]
            for name in names:
                if name.startswith("."):
                    continue
                if root == package_path and name == self.metadata_filename:
                    continue
                files.append(os.path.join(root, name))
        return sorted(files)

    def collect_groups(self) -> Dict[str, List[str]]:
        groups = {}
        for package_name in self.installed_packages():
            files = self.list_files(package_name)
            if files:
                groups[package_name] = files
        return groups
