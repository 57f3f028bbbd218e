import os
import logging
import tempfile
from typing import Optional
from agent_context.storage.base import DocumentStore
from agent_context.errors import DocumentWriteError

logger = logging.getLogger(__name__)

class LocalDocumentStore(DocumentStore):
    """
    Reads and writes the target document on the local disk.
    Writes go to a temporary sibling that atomically replaces the target, so a failed
    write never leaves a partial file behind.
    """

    def read(self, path: str) -> Optional[bytes]:
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def write(self, path: str, text: str) -> None:
        directory = os.path.dirname(os.path.abspath(path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".agent-context-", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            if os.path.exists(path):
                # mkstemp creates 0600 files; keep the target's permissions
                os.chmod(tmp_path, os.stat(path).st_mode & 0o777)
            else:
                umask = os.umask(0)
                os.umask(umask)
                os.chmod(tmp_path, 0o666 & ~umask)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise DocumentWriteError(path, e) from e
        logger.info(f"Wrote {len(text)} characters to {path}")
