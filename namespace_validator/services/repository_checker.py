"""
Source-code repository checks against the GitHub API.

Repository references come from the ``source-code`` annotation and may be a
bare ``owner/repo`` pair or a URL such as ``https://github.com/owner/repo``.
"""

from urllib.parse import urlparse

from namespace_validator.models.repository import RepositoryReference, RepositoryStatus
from namespace_validator.services.github_client import GitHubClient
from namespace_validator.utils.logging import get_logger

logger = get_logger(__name__)


class InvalidRepositoryReference(ValueError):
    """Raised when a source-code reference has no owner/repo pair."""

    def __init__(self, reference: str):
        super().__init__(f"Invalid repository reference: {reference!r}")
        self.reference = reference


def parse_repository_reference(reference: str) -> RepositoryReference:
    """
    Decompose a repository reference into owner and name.

    The host is stripped and the owner and name are the last two path
    segments, so ``acme/widgets``, ``github.com/acme/widgets`` and
    ``https://github.com/acme/widgets`` all resolve to ``acme/widgets``.
    A trailing slash or ``.git`` suffix is ignored.

    Raises:
        InvalidRepositoryReference: If fewer than two segments remain
    """
    raw = reference.strip()
    if "://" in raw:
        segments = [segment for segment in urlparse(raw).path.split("/") if segment]
    else:
        segments = [segment for segment in raw.split("/") if segment]
        # host without scheme, e.g. github.com/acme/widgets; owners never contain dots
        if segments and "." in segments[0]:
            segments = segments[1:]

    if segments and segments[-1].endswith(".git"):
        segments[-1] = segments[-1][: -len(".git")]
    segments = [segment for segment in segments if segment]

    if len(segments) < 2:
        raise InvalidRepositoryReference(reference)

    return RepositoryReference(owner=segments[-2], name=segments[-1], raw=raw)


class RepositoryChecker:
    """Resolves whether a repository exists and is public."""

    def __init__(self, client: GitHubClient):
        self._client = client

    def check(self, reference: RepositoryReference) -> RepositoryStatus:
        """
        Look up the repository.

        Raises:
            GitHubAPIError: If the lookup itself failed (anything but 200/404)
        """
        logger.info(
            f"Checking repository {reference.full_name}",
            extra={"repository": reference.full_name},
        )
        record = self._client.get_repository(reference.owner, reference.name)
        if record is None:
            status = RepositoryStatus.NOT_FOUND
        elif record.get("private", False) or record.get("visibility", "public") != "public":
            status = RepositoryStatus.PRIVATE
        else:
            status = RepositoryStatus.PUBLIC

        logger.info(
            f"Repository {reference.full_name} is {status.value}",
            extra={"repository": reference.full_name, "repository_status": status.value},
        )
        return status
