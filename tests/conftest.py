import copy
import json

import pytest

from firestore_copy import auth
from firestore_copy.config import Config
from firestore_copy.copy_request import CopyRequest


class FakeCredentials:
    def __init__(self):
        self.token = None
        self.refresh_count = 0

    def refresh(self, request):
        self.refresh_count += 1
        self.token = f"token-{self.refresh_count}"


class FailingCredentials:
    def __init__(self, error):
        self.token = None
        self.error = error

    def refresh(self, request):
        raise self.error


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body if body is not None else {}

    @property
    def ok(self):
        return self.status_code < 400

    @property
    def text(self):
        return json.dumps(self._body)

    def json(self):
        return self._body


class RecordingSession:
    """requests.Session stand-in that replays queued responses"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeFirestoreClient:
    """In-memory FirestoreRestClient keyed by document path"""

    def __init__(self, documents=None, failures=None):
        self.documents = dict(documents or {})
        self.failures = dict(failures or {})
        self.calls = []

    def get_document(self, path):
        path = str(path)
        self.calls.append(("get", path))
        if ("get", path) in self.failures:
            raise self.failures[("get", path)]
        fields = self.documents.get(path)
        return copy.deepcopy(fields) if fields is not None else None

    def create_document(self, collection_path, document_id, fields):
        path = f"{collection_path}/{document_id}"
        self.calls.append(("create", path, fields))
        if ("create", path) in self.failures:
            raise self.failures[("create", path)]
        self.documents[path] = fields
        return {"name": path, "fields": fields}

    def delete_document(self, path):
        path = str(path)
        self.calls.append(("delete", path))
        self.documents.pop(path, None)

    def writes(self):
        return [call for call in self.calls if call[0] in ("create", "delete")]


SOURCE_FIELDS = {
    "title": {"stringValue": "hello"},
    "count": {"integerValue": "3"},
}


@pytest.fixture
def source_fields():
    return copy.deepcopy(SOURCE_FIELDS)


@pytest.fixture
def make_request():
    def _make(source="coll/doc1", target="coll/doc2", **flags):
        return CopyRequest.from_flags("demo-project", source, target, **flags)
    return _make


@pytest.fixture
def credentials():
    return FakeCredentials()


@pytest.fixture
def fresh_auth(monkeypatch):
    """Uninitialised auth module with no configured project"""
    monkeypatch.setattr(auth, "_credentials", None)
    monkeypatch.setattr(auth, "_project_id", None)
    monkeypatch.setattr(auth, "_is_initialized", False)
    monkeypatch.setattr(Config, "PROJECT_ID", "")
    return auth
