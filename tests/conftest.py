"""Fake HTTP sessions standing in for the Dropbox API."""

import json

import pytest

from ytdrop.credentials import TOKEN_URL
from ytdrop.sharing import SHARE_URL
from ytdrop.storage import METADATA_URL, UPLOAD_URL


class FakeResponse:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        if isinstance(body, (dict, list)):
            self.text = json.dumps(body)
        else:
            self.text = body or ""

    def json(self):
        return json.loads(self.text)


class ScriptedSession:
    """Returns the given responses in order and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, data=None, headers=None, timeout=None):
        if hasattr(data, "read"):
            data = data.read()
        self.calls.append({"url": url, "data": data, "headers": headers or {}, "timeout": timeout})
        status, body = self.responses.pop(0)
        return FakeResponse(status, body)


class FakeDropbox:
    """Minimal in-memory model of the Dropbox endpoints used by ytdrop."""

    def __init__(self):
        self.files = {}  # path_lower -> (id, content)
        self.links = {}  # path_lower -> url
        self.calls = []
        self.tokens_issued = 0

    def calls_to(self, url):
        return [c for c in self.calls if c["url"] == url]

    def post(self, url, data=None, headers=None, timeout=None):
        if hasattr(data, "read"):
            data = data.read()
        headers = headers or {}
        self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout})
        if url == TOKEN_URL:
            self.tokens_issued += 1
            return FakeResponse(200, {"access_token": f"token-{self.tokens_issued}", "expires_in": 14400})
        if not headers.get("Authorization", "").startswith("Bearer token-"):
            return FakeResponse(401, {"error_summary": "invalid_access_token/"})
        if url == UPLOAD_URL:
            return self._upload(json.loads(headers["Dropbox-API-Arg"]), data)
        if url == METADATA_URL:
            return self._metadata(json.loads(data)["path"])
        if url == SHARE_URL:
            return self._share(json.loads(data)["path"])
        return FakeResponse(404, "unknown endpoint")

    def _find(self, identifier):
        if identifier.startswith("id:"):
            for path, (file_id, _) in self.files.items():
                if file_id == identifier:
                    return path
            return None
        return identifier.lower() if identifier.lower() in self.files else None

    def _upload(self, arg, content):
        path = arg["path"].lower()
        if path in self.files and arg["mode"] == "add":
            return FakeResponse(
                409,
                {
                    "error_summary": "path/conflict/file/",
                    "error": {".tag": "path", "reason": {".tag": "conflict"}},
                },
            )
        file_id = f"id:{len(self.files) + 1:06d}"
        self.files[path] = (file_id, content)
        return FakeResponse(200, {"id": file_id, "path_lower": path, "name": path.rsplit("/", 1)[-1]})

    def _metadata(self, identifier):
        path = self._find(identifier)
        if path is None:
            return FakeResponse(409, {"error_summary": "path/not_found/", "error": {".tag": "path"}})
        return FakeResponse(200, {".tag": "file", "id": self.files[path][0], "path_lower": path})

    def _share(self, path):
        path = path.lower()
        if path not in self.files:
            return FakeResponse(409, {"error_summary": "path/not_found/", "error": {".tag": "path"}})
        if path in self.links:
            return FakeResponse(
                409,
                {
                    "error_summary": "shared_link_already_exists/metadata/",
                    "error": {
                        ".tag": "shared_link_already_exists",
                        "shared_link_already_exists": {
                            ".tag": "metadata",
                            "metadata": {"url": self.links[path], "path_lower": path},
                        },
                    },
                },
            )
        name = path.rsplit("/", 1)[-1]
        url = f"https://www.dropbox.com/s/link{len(self.links) + 1}/{name}?dl=0"
        self.links[path] = url
        return FakeResponse(200, {"url": url, "path_lower": path})


@pytest.fixture
def dropbox():
    return FakeDropbox()


@pytest.fixture
def scripted():
    """Factory building a ``ScriptedSession`` from ``(status, body)`` pairs."""
    return ScriptedSession
