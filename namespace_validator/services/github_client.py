"""
GitHub REST API client.

Thin synchronous wrapper over ``httpx.Client`` for the handful of endpoints
the validator needs: team memberships, repositories, pull requests, their
changed files and contents, and issue comments. Every call is timed into the
run metrics and logged; there are no retries.
"""

import base64
import binascii
import time
from typing import Any, Dict, Iterable, Iterator, List, Optional
from urllib.parse import quote

import httpx

from namespace_validator.utils.logging import get_logger, log_api_call
from namespace_validator.utils.metrics import RunMetrics, track_api_call

logger = get_logger(__name__)

PAGE_SIZE = 100


class GitHubAPIError(Exception):
    """The GitHub API could not be reached or answered unexpectedly."""

    def __init__(self, message: str, status_code: Optional[int] = None, endpoint: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class GitHubClient:
    """
    Client for the GitHub REST API.

    Usage:
        with GitHubClient(token) as client:
            client.get_repository("acme", "widgets")
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        metrics: Optional[RunMetrics] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            token: Bearer token (GITHUB_TOKEN)
            base_url: API root, overridable for GitHub Enterprise
            timeout: Per-request timeout in seconds
            metrics: Optional run metrics to record call latency into
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.metrics = metrics
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        method: str,
        url: str,
        endpoint: str,
        expected: Iterable[int] = (200,),
        allowed: Iterable[int] = (),
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Perform one API call.

        Args:
            method: HTTP method
            url: Path relative to the API root, or an absolute URL
            endpoint: Logical endpoint name used in metrics and errors
            expected: Success status codes
            allowed: Non-success status codes the caller interprets itself

        Returns:
            The response, whose status is in ``expected`` or ``allowed``

        Raises:
            GitHubAPIError: On network failure or any other status code
        """
        start_time = time.perf_counter()
        try:
            with track_api_call(self.metrics, endpoint):
                response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            log_api_call(
                logger,
                endpoint=url,
                method=method,
                duration_ms=(time.perf_counter() - start_time) * 1000,
                error=str(e),
            )
            raise GitHubAPIError(f"{method} {url} failed: {e}", endpoint=endpoint) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        if response.status_code in expected or response.status_code in allowed:
            log_api_call(
                logger,
                endpoint=url,
                method=method,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            return response

        log_api_call(
            logger,
            endpoint=url,
            method=method,
            status_code=response.status_code,
            duration_ms=duration_ms,
            error=f"unexpected status {response.status_code}",
        )
        raise GitHubAPIError(
            f"{method} {url} returned status {response.status_code}",
            status_code=response.status_code,
            endpoint=endpoint,
        )

    @staticmethod
    def _json(response: httpx.Response, endpoint: str, expected_type: type = dict) -> Any:
        """
        Decode a response body, checking its top-level type.

        Raises:
            GitHubAPIError: If the body is not JSON of ``expected_type``
        """
        try:
            data = response.json()
        except ValueError as e:
            raise GitHubAPIError(
                f"{endpoint} returned a body that is not JSON: {e}",
                status_code=response.status_code,
                endpoint=endpoint,
            ) from e
        if not isinstance(data, expected_type):
            raise GitHubAPIError(
                f"{endpoint} returned {type(data).__name__}, expected {expected_type.__name__}",
                status_code=response.status_code,
                endpoint=endpoint,
            )
        return data

    def _paginate(self, url: str, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Iterator[Dict[str, Any]]:
        """Yield items from a list endpoint, page by page, until a short page."""
        page = 1
        while True:
            query = dict(params or {})
            query.update({"per_page": PAGE_SIZE, "page": page})
            response = self._request("GET", url, endpoint, params=query)
            items = self._json(response, endpoint, list)
            yield from (item for item in items if isinstance(item, dict))
            if len(items) < PAGE_SIZE:
                return
            page += 1

    def get_team_membership(self, org: str, team: str, user: str) -> Optional[Dict[str, Any]]:
        """Return the membership record of ``user`` in ``org/team``, or None if there is none."""
        response = self._request(
            "GET",
            f"/orgs/{quote(org)}/teams/{quote(team)}/memberships/{quote(user)}",
            "team_membership",
            allowed=(404,),
        )
        if response.status_code == 404:
            return None
        return self._json(response, "team_membership")

    def get_repository(self, owner: str, repo: str) -> Optional[Dict[str, Any]]:
        """Return the repository record, or None if it does not exist."""
        response = self._request(
            "GET",
            f"/repos/{quote(owner)}/{quote(repo)}",
            "repository",
            allowed=(404,),
        )
        if response.status_code == 404:
            return None
        return self._json(response, "repository")

    def get_pull_request(self, repository: str, number: int) -> Dict[str, Any]:
        response = self._request("GET", f"/repos/{repository}/pulls/{number}", "pull_request")
        return self._json(response, "pull_request")

    def list_pull_request_files(self, repository: str, number: int) -> List[Dict[str, Any]]:
        return list(self._paginate(f"/repos/{repository}/pulls/{number}/files", "pull_request_files"))

    def get_file_content(self, repository: str, path: str, ref: Optional[str] = None) -> bytes:
        """
        Fetch a file's raw bytes via the contents API.

        Args:
            repository: 'owner/name'
            path: File path in the repository
            ref: Commit SHA or branch; default branch when omitted

        Returns:
            Decoded file content
        """
        params = {"ref": ref} if ref else None
        response = self._request(
            "GET",
            f"/repos/{repository}/contents/{quote(path)}",
            "contents",
            params=params,
        )
        data = self._json(response, "contents")
        if not isinstance(data.get("content"), str):
            raise GitHubAPIError(f"{path} is not a file", status_code=response.status_code, endpoint="contents")
        try:
            return base64.b64decode(data["content"])
        except binascii.Error as e:
            raise GitHubAPIError(
                f"{path} has undecodable content: {e}",
                status_code=response.status_code,
                endpoint="contents",
            ) from e

    def list_comments(self, comments_url: str) -> Iterator[Dict[str, Any]]:
        """Yield every comment on a pull request, oldest first."""
        return self._paginate(comments_url, "list_comments")

    def create_comment(self, comments_url: str, body: str) -> None:
        """Post an issue comment. The response body is not read."""
        self._request(
            "POST",
            comments_url,
            "create_comment",
            expected=(201,),
            json={"body": body},
        )
