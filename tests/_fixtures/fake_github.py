"""In-memory GitHub API served through httpx.MockTransport."""

import base64
import json
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

from namespace_validator.services.github_client import GitHubClient

API_URL = "https://api.github.test"
COMMENTS_URL = f"{API_URL}/repos/acme/namespaces/issues/7/comments"

NAMESPACE_YAML = """\
apiVersion: v1
kind: Namespace
metadata:
  name: widgets
  annotations:
    team: platform
    source-code: https://github.com/acme/widgets
"""


class FakeGitHub:
    """Minimal stateful stand-in for the GitHub REST endpoints the validator uses."""

    def __init__(self):
        self.memberships: Dict[Tuple[str, str, str], str] = {}
        self.repositories: Dict[str, Dict[str, Any]] = {}
        self.pull_requests: Dict[Tuple[str, int], Dict[str, Any]] = {}
        self.pull_request_files: Dict[Tuple[str, int], List[Dict[str, Any]]] = {}
        self.contents: Dict[Tuple[str, str], bytes] = {}
        self.comments: List[Dict[str, Any]] = []
        self.posted: List[str] = []
        self.errors: Dict[str, int] = {}
        self.raw: Dict[Tuple[str, str], Tuple[int, str]] = {}
        self.requests: List[httpx.Request] = []

    # setup helpers

    def add_member(self, team: str, user: str, state: str = "active", org: str = "acme") -> None:
        self.memberships[(org, team, user)] = state

    def add_repository(self, full_name: str, private: bool = False) -> None:
        self.repositories[full_name] = {
            "full_name": full_name,
            "private": private,
            "visibility": "private" if private else "public",
        }

    def add_comment(self, user: str, body: str) -> None:
        self.comments.append({"id": len(self.comments) + 1, "user": {"login": user}, "body": body})

    def fail(self, path: str, status_code: int = 500) -> None:
        self.errors[path] = status_code

    def respond(self, path: str, status_code: int, content: str, method: str = "GET") -> None:
        """Answer ``method path`` with a literal body instead of the JSON the route would give."""
        self.raw[(method, path)] = (status_code, content)

    @property
    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self, metrics=None) -> GitHubClient:
        return GitHubClient("test-token", base_url=API_URL, metrics=metrics, transport=self.transport)

    # request handling

    @staticmethod
    def _page(items: List[Any], request: httpx.Request) -> List[Any]:
        page = int(request.url.params.get("page", "1"))
        per_page = int(request.url.params.get("per_page", "30"))
        return items[(page - 1) * per_page: page * per_page]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.errors:
            return httpx.Response(self.errors[path], json={"message": "Server Error"})

        if (request.method, path) in self.raw:
            status_code, content = self.raw[(request.method, path)]
            if request.method == "POST":
                self.posted.append(json.loads(request.content)["body"])
            return httpx.Response(status_code, content=content.encode())

        match = re.fullmatch(r"/orgs/([^/]+)/teams/([^/]+)/memberships/([^/]+)", path)
        if match:
            state = self.memberships.get(match.groups())
            if state is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"state": state, "role": "member"})

        match = re.fullmatch(r"/repos/([^/]+/[^/]+)/issues/(\d+)/comments", path)
        if match:
            if request.method == "POST":
                body = json.loads(request.content)["body"]
                self.posted.append(body)
                return httpx.Response(201, json={"id": 1000 + len(self.posted), "body": body})
            return httpx.Response(200, json=self._page(self.comments, request))

        match = re.fullmatch(r"/repos/([^/]+/[^/]+)/pulls/(\d+)/files", path)
        if match:
            files = self.pull_request_files.get((match.group(1), int(match.group(2))), [])
            return httpx.Response(200, json=self._page(files, request))

        match = re.fullmatch(r"/repos/([^/]+/[^/]+)/pulls/(\d+)", path)
        if match:
            pull_request = self.pull_requests.get((match.group(1), int(match.group(2))))
            if pull_request is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=pull_request)

        match = re.fullmatch(r"/repos/([^/]+/[^/]+)/contents/(.+)", path)
        if match:
            content = self.contents.get((match.group(1), match.group(2)))
            if content is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(
                200,
                json={
                    "type": "file",
                    "encoding": "base64",
                    "content": base64.b64encode(content).decode("ascii"),
                },
            )

        match = re.fullmatch(r"/repos/([^/]+)/([^/]+)", path)
        if match:
            record = self.repositories.get(f"{match.group(1)}/{match.group(2)}")
            if record is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=record)

        return httpx.Response(404, json={"message": f"No route for {path}"})


def write_event(tmp_path, pull_request: Optional[Dict[str, Any]] = None, **extra: Any) -> str:
    payload: Dict[str, Any] = {
        "action": "opened",
        "pull_request": pull_request if pull_request is not None else {
            "number": 7,
            "comments_url": COMMENTS_URL,
            "user": {"login": "alice"},
            "head": {"sha": "abc123"},
        },
        "repository": {"full_name": "acme/namespaces", "owner": {"login": "acme"}},
    }
    payload.update(extra)
    event_file = tmp_path / "event.json"
    event_file.write_text(json.dumps(payload))
    return str(event_file)
