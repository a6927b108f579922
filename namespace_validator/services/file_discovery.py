"""
Discovery of changed namespace files.

Two sources exist, picked once at startup:

- :class:`ArgumentFileSource` takes the paths given on the command line
  (typically produced by a changed-files action) and reads them from the
  checkout.
- :class:`PullRequestFileSource` asks the API for the pull request's changed
  files and fetches each one at the head commit.
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from namespace_validator.models.file_change import ChangedFile, FileStatus
from namespace_validator.models.pull_request import PullRequestContext
from namespace_validator.services.github_client import GitHubClient
from namespace_validator.utils.logging import get_logger

logger = get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


class DiscoveryMode(str, Enum):
    """Where the list of changed files comes from."""

    ARGUMENTS = "arguments"
    API = "api"


def is_namespace_file(path: str, directory: Optional[str] = None) -> bool:
    """
    Whether ``path`` is a YAML file, optionally under ``directory``.

    Args:
        path: Repository-relative path
        directory: Required top-level directory, or None for any
    """
    if not path.endswith(YAML_SUFFIXES):
        return False
    if directory:
        prefix = directory.strip("/") + "/"
        if path.startswith("./"):
            path = path[2:]
        return path.startswith(prefix)
    return True


class ArgumentFileSource:
    """Changed files passed explicitly as paths."""

    def __init__(self, paths: Sequence[str]):
        self._paths = list(paths)

    def discover(self) -> List[ChangedFile]:
        files = []
        for path in self._paths:
            if not is_namespace_file(path):
                logger.info(f"Skipping non-YAML file: {path}", extra={"file": path})
                continue
            files.append(ChangedFile(path=path))
        return files

    def read(self, changed_file: ChangedFile) -> bytes:
        """
        Raises:
            OSError: If the file cannot be read
        """
        if changed_file.content is not None:
            return changed_file.content
        return Path(changed_file.path).read_bytes()


class PullRequestFileSource:
    """Changed files listed by the pull request files API."""

    def __init__(self, client: GitHubClient, context: PullRequestContext, namespace_dir: str):
        self._client = client
        self._context = context
        self._namespace_dir = namespace_dir

    def discover(self) -> List[ChangedFile]:
        """
        List YAML files under the namespace directory changed by the PR.

        Removed files are skipped; there is nothing left to validate.

        Raises:
            GitHubAPIError: If the file list cannot be retrieved
        """
        if not self._context.repository or self._context.number is None:
            raise ValueError("Pull request repository and number are required for API discovery")

        files = []
        for entry in self._client.list_pull_request_files(self._context.repository, self._context.number):
            path = entry.get("filename")
            status = entry.get("status")
            if not isinstance(path, str) or not is_namespace_file(path, self._namespace_dir):
                logger.debug(f"Skipping file outside {self._namespace_dir}: {path}", extra={"file": path})
                continue
            if status == FileStatus.REMOVED.value:
                logger.info(f"Skipping removed file: {path}", extra={"file": path})
                continue
            known = status in {member.value for member in FileStatus}
            files.append(ChangedFile(path=path, status=status if known else None))

        logger.info(
            f"Found {len(files)} changed namespace file(s)",
            extra={"pr_number": self._context.number},
        )
        return files

    def read(self, changed_file: ChangedFile) -> bytes:
        """
        Raises:
            GitHubAPIError: If the contents cannot be fetched
        """
        if changed_file.content is not None:
            return changed_file.content
        return self._client.get_file_content(
            self._context.repository,
            changed_file.path,
            ref=self._context.head_sha,
        )
