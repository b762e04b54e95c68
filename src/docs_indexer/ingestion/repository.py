"""Source repository acquisition into a disposable local working copy."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote, urlsplit, urlunsplit

from docs_indexer.errors import AcquisitionError, ConfigurationError

logger = logging.getLogger(__name__)


def derive_namespace(source_ref: str) -> str:
    """Return the namespace for *source_ref*: its last path segment minus ``.git``.

    >>> derive_namespace("https://github.com/org/docs.git")
    'docs'
    >>> derive_namespace("git@github.com:org/handbook")
    'handbook'
    """
    name = re.split(r"[/:\\]", source_ref.strip().rstrip("/\\"))[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not name:
        raise ConfigurationError(f"Cannot derive a namespace from {source_ref!r}")
    return name


class RepositorySource(ABC):
    """Provides an exclusive local working copy of a source repository."""

    def __init__(self, work_dir: str | Path) -> None:
        self.work_dir = Path(work_dir)

    @abstractmethod
    def fetch(self, source_ref: str) -> Path:
        """Populate :attr:`work_dir` from *source_ref*, removing any stale copy first."""
        ...

    def remove(self, path: str | Path) -> None:
        """Delete *path* if it exists."""
        path = Path(path)
        if not path.exists():
            return
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise AcquisitionError(f"Failed to remove working copy {path}: {exc}") from exc
        logger.info("Removed working copy %s", path)


class GitRepositorySource(RepositorySource):
    """Clones repositories with the ``git`` command-line client.

    Parameters
    ----------
    work_dir:
        Where the working copy is created; deleted before every clone.
    token:
        Optional access token for private HTTPS repositories.
    depth:
        Shallow-clone depth, or ``None`` for full history.
    """

    def __init__(self, work_dir: str | Path = "temp_repo", *, token: str = "", depth: int | None = 1) -> None:
        super().__init__(work_dir)
        self._token = token
        self._depth = depth

    def fetch(self, source_ref: str) -> Path:
        self.remove(self.work_dir)

        args = ["git", "clone"]
        if self._depth:
            args += ["--depth", str(self._depth)]
        args += ["--", self._authenticated(source_ref), str(self.work_dir)]

        logger.info("Cloning %s into %s", source_ref, self.work_dir)
        try:
            completed = subprocess.run(args, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise AcquisitionError(f"Cannot run git: {exc}") from exc
        if completed.returncode != 0:
            detail = self._redact(completed.stderr.strip()) or "git clone failed"
            raise AcquisitionError(f"Failed to clone {source_ref}: {detail}")
        logger.info("Repository cloned successfully")
        return self.work_dir

    def _authenticated(self, source_ref: str) -> str:
        """Embed the access token into HTTPS URLs that carry no credentials."""
        if not self._token:
            return source_ref
        parts = urlsplit(source_ref)
        if parts.scheme != "https" or "@" in parts.netloc:
            return source_ref
        netloc = f"x-access-token:{quote(self._token, safe='')}@{parts.netloc}"
        return urlunsplit(parts._replace(netloc=netloc))

    def _redact(self, message: str) -> str:
        if self._token:
            message = message.replace(quote(self._token, safe=""), "***").replace(self._token, "***")
        return message
