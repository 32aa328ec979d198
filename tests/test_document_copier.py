import pytest

from firestore_copy.copy_request import ConfigurationError
from firestore_copy.services.document_copier import CopyOutcome, DocumentCopier, SourceNotFoundError
from firestore_copy.services.firestore_rest import FirestoreAPIError

from conftest import FakeFirestoreClient

EXISTING = {"title": {"stringValue": "old"}}


class TestCopyOneDocument:
    def test_absent_target_is_created(self, make_request, source_fields):
        client = FakeFirestoreClient({"coll/doc1": source_fields})
        copier = DocumentCopier(make_request(), client)

        result = copier.execute()

        assert result.outcome is CopyOutcome.CREATED
        assert result.succeeded
        assert client.writes() == [("create", "coll/doc2", source_fields)]

    def test_existing_target_overwrite(self, make_request, source_fields):
        client = FakeFirestoreClient({"coll/doc1": source_fields, "coll/doc2": EXISTING})
        copier = DocumentCopier(make_request(overwrite=True), client)

        result = copier.execute()

        assert result.outcome is CopyOutcome.OVERWRITTEN
        assert client.writes() == [
            ("delete", "coll/doc2"),
            ("create", "coll/doc2", source_fields),
        ]
        assert client.documents["coll/doc2"] == source_fields

    def test_existing_target_skip(self, make_request, source_fields):
        client = FakeFirestoreClient({"coll/doc1": source_fields, "coll/doc2": EXISTING})
        copier = DocumentCopier(make_request(skip=True), client)

        result = copier.execute()

        assert result.outcome is CopyOutcome.SKIPPED
        assert result.succeeded
        assert client.writes() == []
        assert client.documents["coll/doc2"] == EXISTING

    def test_existing_target_without_policy_reports_conflict(self, make_request, source_fields):
        client = FakeFirestoreClient({"coll/doc1": source_fields, "coll/doc2": EXISTING})
        copier = DocumentCopier(make_request(), client)

        result = copier.execute()

        assert result.outcome is CopyOutcome.CONFLICT
        assert not result.succeeded
        assert client.writes() == []
        assert client.documents["coll/doc2"] == EXISTING

    def test_missing_source_fails_without_writes(self, make_request):
        client = FakeFirestoreClient({"coll/doc2": EXISTING})
        copier = DocumentCopier(make_request(overwrite=True), client)

        with pytest.raises(SourceNotFoundError):
            copier.execute()
        assert client.writes() == []

    def test_failed_target_lookup_is_not_absence(self, make_request, source_fields):
        failure = FirestoreAPIError("unavailable", 503, "")
        client = FakeFirestoreClient(
            {"coll/doc1": source_fields},
            failures={("get", "coll/doc2"): failure},
        )
        copier = DocumentCopier(make_request(), client)

        with pytest.raises(FirestoreAPIError):
            copier.execute()
        assert client.writes() == []

    def test_rejected_create_propagates(self, make_request, source_fields):
        client = FakeFirestoreClient(
            {"coll/doc1": source_fields},
            failures={("create", "coll/doc2"): FirestoreAPIError("denied", 403, "")},
        )
        with pytest.raises(FirestoreAPIError):
            DocumentCopier(make_request(), client).execute()

    def test_call_order(self, make_request, source_fields):
        client = FakeFirestoreClient({"coll/doc1": source_fields, "coll/doc2": EXISTING})
        DocumentCopier(make_request(overwrite=True), client).execute()
        assert [call[0] for call in client.calls] == ["get", "get", "delete", "create"]


class TestCache:
    def test_fetched_documents_are_cached(self, make_request, source_fields):
        client = FakeFirestoreClient({"coll/doc1": source_fields, "coll/doc2": EXISTING})
        copier = DocumentCopier(make_request(skip=True), client)

        copier.execute()

        assert copier.docs.get("coll/doc1") == source_fields
        assert "coll/doc2" in copier.docs

    def test_delete_evicts_target(self, make_request, source_fields):
        client = FakeFirestoreClient({"coll/doc1": source_fields, "coll/doc2": EXISTING})
        copier = DocumentCopier(make_request(overwrite=True), client)

        copier.execute()

        assert "coll/doc2" not in copier.docs
        assert copier.docs.size() == 1


class TestExecute:
    def test_collection_target_keeps_document_id(self, make_request, source_fields):
        client = FakeFirestoreClient({"coll/doc1": source_fields})
        result = DocumentCopier(make_request(target="backup"), client).execute()

        assert str(result.target) == "backup/doc1"
        assert client.writes() == [("create", "backup/doc1", source_fields)]

    def test_collection_source_is_rejected_before_network(self, make_request):
        client = FakeFirestoreClient()
        with pytest.raises(ConfigurationError):
            DocumentCopier(make_request(source="coll", target="other"), client).execute()
        assert client.calls == []

    def test_same_source_and_target_is_rejected(self, make_request):
        client = FakeFirestoreClient()
        with pytest.raises(ConfigurationError):
            DocumentCopier(make_request(source="coll/doc1", target="/coll/doc1/"), client).execute()
        assert client.calls == []
