import json

import pytest

from ytdrop.errors import ShareError
from ytdrop.sharing import SHARE_URL, ShareLink, get_shareable_link


def test_get_shareable_link_creates_link(scripted):
    session = scripted((200, {"url": "https://www.dropbox.com/s/xyz/clip.mp4?dl=0"}))
    link = get_shareable_link("/downloads/clip.mp4", "tok", session=session)
    assert link == ShareLink(url="https://www.dropbox.com/s/xyz/clip.mp4?dl=0")
    call = session.calls[0]
    assert call["url"] == SHARE_URL
    assert json.loads(call["data"]) == {"path": "/downloads/clip.mp4"}
    assert call["headers"]["Authorization"] == "Bearer tok"
    assert call["headers"]["Content-Type"] == "application/json"


def test_get_shareable_link_is_idempotent(tmp_path, dropbox):
    dropbox.files["/downloads/clip.mp4"] = ("id:000001", b"video")
    first = get_shareable_link("/downloads/clip.mp4", "token-1", session=dropbox)
    second = get_shareable_link("/downloads/clip.mp4", "token-1", session=dropbox)
    assert first == second
    assert len(dropbox.links) == 1
    # no lookup before creating
    assert [c["url"] for c in dropbox.calls] == [SHARE_URL, SHARE_URL]


def test_get_shareable_link_other_conflict_is_error(scripted):
    body = '{"error_summary": "path/not_found/", "error": {".tag": "path"}}'
    session = scripted((409, body))
    with pytest.raises(ShareError) as excinfo:
        get_shareable_link("/downloads/missing.mp4", "tok", session=session)
    assert excinfo.value.status == 409
    assert excinfo.value.body == body


def test_get_shareable_link_rejected(scripted):
    session = scripted((400, "Error in call to API function: bad path"))
    with pytest.raises(ShareError) as excinfo:
        get_shareable_link("downloads/clip.mp4", "tok", session=session)
    assert "400" in str(excinfo.value)
    assert "bad path" in str(excinfo.value)


def test_get_shareable_link_response_without_url(scripted):
    session = scripted((200, {"path_lower": "/downloads/clip.mp4"}))
    with pytest.raises(ShareError):
        get_shareable_link("/downloads/clip.mp4", "tok", session=session)
