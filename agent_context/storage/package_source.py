import logging
import os
from importlib import metadata as importlib_metadata
from typing import Iterable, Iterator, List
from agent_context.models.context import PackageSpecification
from agent_context.storage.base import PackageSource

logger = logging.getLogger(__name__)

class InstalledPackageSource(PackageSource):
    """
    Enumerates distributions installed in the running interpreter.

    A distribution can ship several top-level import packages; each one that exists
    as a directory is reported with the distribution's name and version.
    """

    def specifications(self) -> Iterator[PackageSpecification]:
        seen = set()
        for dist in importlib_metadata.distributions():
            name = dist.metadata["Name"]
            if not name or name in seen:
                continue
            seen.add(name)

            for top_level in self._top_level_names(dist):
                root = str(dist.locate_file(top_level))
                if os.path.isdir(root):
                    yield PackageSpecification(name=name, version=dist.version, root=root)

    def _top_level_names(self, dist: importlib_metadata.Distribution) -> List[str]:
        text = dist.read_text("top_level.txt")
        if text:
            return [line.strip() for line in text.splitlines() if line.strip()]

        # No top_level.txt (most non-setuptools builds): infer from the RECORD
        names = []
        for path in dist.files or []:
            parts = path.parts
            if len(parts) < 2 or parts[0] == ".." or parts[0].endswith((".dist-info", ".egg-info", ".data")):
                continue
            if parts[0] not in names:
                names.append(parts[0])
        return names

class StaticPackageSource(PackageSource):
    """A fixed list of specifications, in the given order."""

    def __init__(self, specifications: Iterable[PackageSpecification]):
        self._specifications = list(specifications)

    def specifications(self) -> Iterator[PackageSpecification]:
        return iter(self._specifications)
