"""Tests for the GitHub contents API adapter."""
import base64
from unittest.mock import MagicMock

import pytest
import requests

from injurylog.adapters.base import AdapterRegistry
from injurylog.adapters.github_adapter import GitHubAdapter
from injurylog.errors import ConflictError, NotFoundError, StorageError

CONTENTS_URL = "https://api.github.com/repos/club/physio/contents/data/injury_log.csv"


def make_response(status_code=200, payload=None, content=b""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload or {}
    response.content = content
    response.text = str(payload)
    if not response.ok:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code}")
    return response


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def adapter(session):
    return GitHubAdapter(token="t0ken", owner="club", repo="physio", session=session)


class TestGet:

    def test_decodes_base64_content(self, adapter, session):
        encoded = base64.b64encode(b"key,status\nA-2024-01-01,Injured").decode()
        session.get.return_value = make_response(payload={"encoding": "base64", "content": encoded, "sha": "abc123"})

        blob = adapter.get("data/injury_log.csv")

        assert blob.content == "key,status\nA-2024-01-01,Injured"
        assert blob.version == "abc123"
        assert session.get.call_args.args[0] == CONTENTS_URL

    def test_sends_auth_headers(self, adapter, session):
        assert session.headers["Authorization"] == "Bearer t0ken"
        assert session.headers["Accept"] == "application/vnd.github+json"

    def test_branch_is_passed_as_ref(self, session):
        adapter = GitHubAdapter(token="t", owner="club", repo="physio", branch="data", session=session)
        session.get.return_value = make_response(payload={"encoding": "base64", "content": "", "sha": "s"})

        adapter.get("data/injury_log.csv")

        assert session.get.call_args.kwargs["params"] == {"ref": "data"}

    def test_not_found(self, adapter, session):
        session.get.return_value = make_response(status_code=404)

        with pytest.raises(NotFoundError):
            adapter.get("data/injury_log.csv")

    def test_large_file_is_fetched_raw(self, adapter, session):
        session.get.side_effect = [
            make_response(payload={"encoding": "none", "content": "", "sha": "big1"}),
            make_response(content=b"key,status\nA-2024-01-01,Injured"),
        ]

        blob = adapter.get("data/injury_log.csv")

        assert blob == ("key,status\nA-2024-01-01,Injured", "big1")
        assert session.get.call_args.kwargs["headers"]["Accept"] == "application/vnd.github.raw+json"

    def test_server_error(self, adapter, session):
        session.get.return_value = make_response(status_code=500)

        with pytest.raises(StorageError):
            adapter.get("data/injury_log.csv")

    def test_transport_error(self, adapter, session):
        session.get.side_effect = requests.ConnectionError("down")

        with pytest.raises(StorageError):
            adapter.get("data/injury_log.csv")


class TestPut:

    def test_sends_sha_and_content(self, adapter, session):
        session.put.return_value = make_response(payload={"content": {"sha": "def456"}})

        version = adapter.put("data/injury_log.csv", "key,status", "abc123", "Nightly update")

        body = session.put.call_args.kwargs["json"]
        assert version == "def456"
        assert body["sha"] == "abc123"
        assert body["message"] == "Nightly update"
        assert base64.b64decode(body["content"]) == b"key,status"

    def test_create_omits_sha(self, adapter, session):
        session.put.return_value = make_response(status_code=201, payload={"content": {"sha": "new"}})

        adapter.put("data/injury_log.csv", "key,status", None)

        assert "sha" not in session.put.call_args.kwargs["json"]

    @pytest.mark.parametrize("status_code, message", [
        (409, "data/injury_log.csv does not match stale"),
        (422, "Invalid request.\n\n\"sha\" wasn't supplied."),
    ])
    def test_stale_sha_is_conflict(self, adapter, session, status_code, message):
        session.put.return_value = make_response(status_code=status_code, payload={"message": message})

        with pytest.raises(ConflictError):
            adapter.put("data/injury_log.csv", "key,status", "stale")

    def test_other_unprocessable_is_not_conflict(self, adapter, session):
        session.put.return_value = make_response(status_code=422, payload={"message": "Invalid request.\n\nbranch is invalid."})

        with pytest.raises(StorageError) as exc_info:
            adapter.put("data/injury_log.csv", "key,status", "abc123")
        assert not isinstance(exc_info.value, ConflictError)
        assert session.put.call_count == 1

    def test_other_errors(self, adapter, session):
        session.put.return_value = make_response(status_code=403)

        with pytest.raises(StorageError) as exc_info:
            adapter.put("data/injury_log.csv", "key,status", "abc123")
        assert not isinstance(exc_info.value, ConflictError)


def test_requires_credentials():
    with pytest.raises(ValueError):
        GitHubAdapter(token=None, owner="club", repo="physio")


def test_registered():
    assert {"github", "memory"} <= set(AdapterRegistry.list_adapters())
