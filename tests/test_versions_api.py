"""Tests for the /api/docs and /api/docs/{doc_id}/versions endpoints."""


def _save(client, doc_id: str, content: str, **extra):
    return client.put(f"/api/docs/{doc_id}", json={"content": content, **extra})


class TestDocuments:

    def test_save_creates_first_version(self, client):
        resp = _save(client, "doc-1", "Hello")
        assert resp.status_code == 201
        record = resp.json()
        assert record["version"] == 1
        assert record["is_baseline"] is True
        assert record["kind"] == "baseline"
        assert record["content"] == "Hello"

    def test_get_document_returns_current_content(self, client):
        _save(client, "doc-1", "Hello")
        _save(client, "doc-1", "Hello world")

        resp = client.get("/api/docs/doc-1")
        assert resp.status_code == 200
        data = resp.json()
        assert data["content"] == "Hello world"
        assert data["current_version"] == 2

    def test_get_missing_document(self, client):
        resp = client.get("/api/docs/doc-nonexistent")
        assert resp.status_code == 404
        assert resp.json()["error"] == "DOCUMENT_NOT_FOUND"

    def test_list_documents(self, client):
        _save(client, "doc-a", "a")
        _save(client, "doc-b", "b")
        resp = client.get("/api/docs")
        assert resp.status_code == 200
        assert {d["id"] for d in resp.json()} == {"doc-a", "doc-b"}

    def test_stale_expected_version_conflicts(self, client):
        _save(client, "doc-1", "v1")
        _save(client, "doc-1", "v2")
        resp = _save(client, "doc-1", "v3", expected_version=1)
        assert resp.status_code == 409
        body = resp.json()
        assert body["error"] == "VERSION_CONFLICT"
        assert body["details"]["version"] == 2

    def test_missing_content_rejected(self, client):
        resp = client.put("/api/docs/doc-1", json={})
        assert resp.status_code == 422

    def test_delete_document(self, client):
        _save(client, "doc-1", "bye")
        assert client.delete("/api/docs/doc-1").status_code == 204
        assert client.get("/api/docs/doc-1").status_code == 404
        assert client.delete("/api/docs/doc-1").status_code == 204


class TestVersions:

    def test_list_versions(self, client):
        _save(client, "doc-1", "Hello")
        _save(client, "doc-1", "Hello world")

        resp = client.get("/api/docs/doc-1/versions")
        assert resp.status_code == 200
        versions = resp.json()
        assert [v["version"] for v in versions] == [1, 2]
        assert versions[1]["kind"] == "delta"
        assert versions[1]["delta"] == '[{"t":"u","v":"Hello"},{"t":"a","v":" world"}]'

    def test_get_version_content(self, client):
        _save(client, "doc-1", "abcdef")
        _save(client, "doc-1", "abXYef")

        resp = client.get("/api/docs/doc-1/versions/1")
        assert resp.status_code == 200
        assert resp.json()["content"] == "abcdef"
        assert client.get("/api/docs/doc-1/versions/2").json()["content"] == "abXYef"

    def test_version_beyond_chain(self, client):
        _save(client, "doc-1", "only")
        resp = client.get("/api/docs/doc-1/versions/5")
        assert resp.status_code == 404
        assert resp.json()["error"] == "MISSING_BASELINE"

    def test_version_zero_rejected(self, client):
        _save(client, "doc-1", "only")
        assert client.get("/api/docs/doc-1/versions/0").status_code == 422

    def test_versions_404_for_nonexistent_doc(self, client):
        resp = client.get("/api/docs/doc-nonexistent/versions")
        assert resp.status_code == 404

    def test_history(self, client):
        for content in ["one", "one two", "one two three"]:
            _save(client, "doc-1", content)

        resp = client.get("/api/docs/doc-1/history")
        assert resp.status_code == 200
        history = resp.json()
        assert [h["version"] for h in history] == [3, 2, 1]
        assert history[0]["content"] == "one two three"
        assert history[0]["summary"] == "+1 words"


class TestStats:

    def test_document_stats(self, client):
        _save(client, "doc-1", "Hello")
        _save(client, "doc-1", "Hello world")

        resp = client.get("/api/docs/doc-1/stats")
        assert resp.status_code == 200
        data = resp.json()
        assert data["storage"]["total_versions"] == 2
        assert data["storage"]["deltas"] == 1
        assert data["metadata"]["current_version"] == 2

    def test_collection_stats(self, client):
        _save(client, "doc-a", "a")
        _save(client, "doc-b", "b")
        _save(client, "doc-b", "bb")

        data = client.get("/api/stats").json()
        assert data["total_documents"] == 2
        assert data["total_versions"] == 3
        assert data["most_active_document"] == "doc-b"

    def test_collection_stats_empty(self, client):
        data = client.get("/api/stats").json()
        assert data["total_documents"] == 0
        assert data["average_compression_ratio"] == 0


class TestExportImport:

    def test_export_then_import(self, client):
        _save(client, "doc-1", "Hello")
        _save(client, "doc-1", "Hello world")

        exported = client.get("/api/export").json()
        assert list(exported["chains"]) == ["doc-1"]
        client.delete("/api/docs/doc-1")

        resp = client.post("/api/import", json={"chains": exported["chains"]})
        assert resp.status_code == 200
        assert resp.json() == {"imported": 1, "errors": []}
        assert client.get("/api/docs/doc-1/versions/2").json()["content"] == "Hello world"

    def test_import_rejects_unknown_delta_tag(self, client):
        chains = {
            "doc-1": [
                {"document_id": "doc-1", "version": 1, "timestamp": "2024-01-01T00:00:00Z",
                 "kind": "baseline", "content": "a", "size": 1},
                {"document_id": "doc-1", "version": 2, "timestamp": "2024-01-01T00:00:00Z",
                 "kind": "delta", "delta": '[{"t":"q","v":"a"}]', "size": 18},
            ]
        }
        resp = client.post("/api/import", json={"chains": chains})
        assert resp.status_code == 200
        assert resp.json()["imported"] == 0
        assert client.get("/api/docs/doc-1").status_code == 404

    def test_import_rejects_record_with_both_payloads(self, client):
        record = {"document_id": "doc-1", "version": 1, "timestamp": "2024-01-01T00:00:00Z",
                  "kind": "baseline", "content": "a", "delta": "[]"}
        resp = client.post("/api/import", json={"chains": {"doc-1": [record]}})
        assert resp.status_code == 422
