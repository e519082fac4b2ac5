class TestDocumentsAPI:
    def test_post_single_document(self, client, auth_headers):
        """Test POST /documents"""
        response = client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers=auth_headers,
            json=[{"content": "hello", "source": "test"}],
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["content"] == "hello"
        assert data[0]["collection_id"] == "abc"
        assert data[0]["owner_id"] == "user-1"
        assert data[0]["id"] is not None
        assert data[0]["created_at"] is not None
        assert len(data[0]["embedding"]) == 4

    def test_post_batch_keeps_order_and_metadata(self, client, auth_headers):
        response = client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers=auth_headers,
            json=[
                {"content": "one", "source": "a", "metadata": {"page": 1}},
                {"content": "two", "source": "b", "metadata": ["x", 2]},
                {"content": "three", "source": "c"},
            ],
        )

        assert response.status_code == 200
        data = response.json()
        assert [d["content"] for d in data] == ["one", "two", "three"]
        assert [d["metadata"] for d in data] == [{"page": 1}, ["x", 2], None]

    def test_post_missing_collection_id(self, client, auth_headers):
        response = client.post(
            "/documents",
            headers=auth_headers,
            json=[{"content": "hello", "source": "test"}],
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Missing collection_id query parameter"
        assert response.json()["kind"] == "invalid_request"

    def test_post_empty_batch(self, client, auth_headers, fake_embedding):
        response = client.post(
            "/documents", params={"collection_id": "abc"}, headers=auth_headers, json=[]
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Missing documents in request body"
        assert fake_embedding.calls == []

    def test_post_without_body(self, client, auth_headers):
        response = client.post(
            "/documents", params={"collection_id": "abc"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_request"

    def test_post_malformed_record(self, client, auth_headers, fake_embedding):
        response = client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers=auth_headers,
            json=[{"source": "test"}],
        )

        assert response.status_code == 400
        body = response.json()
        assert body["kind"] == "invalid_request"
        assert "content" in body["error"]
        assert fake_embedding.calls == []

    def test_post_empty_content_rejected(self, client, auth_headers):
        response = client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers=auth_headers,
            json=[{"content": "", "source": "test"}],
        )

        assert response.status_code == 400

    def test_post_embedding_failure(self, client, auth_headers, fake_embedding, fake_database):
        fake_embedding.fail = True

        response = client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers=auth_headers,
            json=[{"content": "a", "source": "t"}, {"content": "b", "source": "t"}],
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "embedding_failure"
        assert "quota exceeded" in response.json()["error"]
        assert fake_database.rows == []

    def test_post_storage_failure(self, client, auth_headers, fake_database):
        fake_database.fail_insert = True

        response = client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers=auth_headers,
            json=[{"content": "a", "source": "t"}],
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "storage_failure"

    def test_post_invalid_key(self, client):
        response = client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers={"X-API-Key": "wrong"},
            json=[{"content": "hello", "source": "test"}],
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid API key", "kind": "unauthorized"}

    def test_post_twice_creates_distinct_documents(self, client, auth_headers):
        request = dict(
            params={"collection_id": "abc"},
            headers=auth_headers,
            json=[{"content": "same", "source": "test"}],
        )

        first = client.post("/documents", **request).json()
        second = client.post("/documents", **request).json()

        assert first[0]["id"] != second[0]["id"]

    def test_injection_content_persisted_verbatim(self, client, auth_headers):
        payload = "'; DROP TABLE documents; --"
        client.post(
            "/documents",
            params={"collection_id": "other"},
            headers=auth_headers,
            json=[{"content": "untouched", "source": "test"}],
        )

        response = client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers=auth_headers,
            json=[{"content": payload, "source": payload}],
        )

        assert response.status_code == 200
        assert response.json()[0]["content"] == payload
        other = client.get(
            "/documents", params={"collection_id": "other"}, headers=auth_headers
        ).json()
        assert [d["content"] for d in other] == ["untouched"]

    def test_get_empty_collection(self, client, auth_headers):
        response = client.get(
            "/documents", params={"collection_id": "abc"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == []

    def test_get_returns_at_most_one_page(self, client, auth_headers):
        client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers=auth_headers,
            json=[{"content": f"doc {i}", "source": "test"} for i in range(55)],
        )

        response = client.get(
            "/documents", params={"collection_id": "abc"}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 50
        assert all(d["collection_id"] == "abc" for d in data)
        assert "embedding" not in data[0]

    def test_get_with_embeddings_and_limit(self, client, auth_headers):
        client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers=auth_headers,
            json=[{"content": f"doc {i}", "source": "test"} for i in range(3)],
        )

        response = client.get(
            "/documents",
            params={"collection_id": "abc", "limit": 2, "include_embedding": "true"},
            headers=auth_headers,
        )

        data = response.json()
        assert len(data) == 2
        assert len(data[0]["embedding"]) == 4

    def test_get_missing_collection_id(self, client, auth_headers):
        response = client.get("/documents", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing collection_id query parameter"

    def test_get_invalid_key(self, client):
        response = client.get(
            "/documents", params={"collection_id": "abc"}, headers={"X-API-Key": "wrong"}
        )

        assert response.status_code == 401

    def test_get_missing_key(self, client):
        response = client.get("/documents", params={"collection_id": "abc"})

        assert response.status_code == 401
        assert response.json()["error"] == "Missing API key"

    def test_auth_checked_before_collection_id(self, client):
        response = client.get("/documents")

        assert response.status_code == 401

    def test_bearer_token_accepted(self, client, auth_headers):
        response = client.get(
            "/documents",
            params={"collection_id": "abc"},
            headers={"Authorization": f"Bearer {auth_headers['X-API-Key']}"},
        )

        assert response.status_code == 200

    def test_get_storage_failure(self, client, auth_headers, fake_database):
        fake_database.fail_list = True

        response = client.get(
            "/documents", params={"collection_id": "abc"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "storage_failure"

    def test_key_lookup_failure_is_unauthorized(self, client, auth_headers, fake_database):
        fake_database.fail_lookup = True

        response = client.get(
            "/documents", params={"collection_id": "abc"}, headers=auth_headers
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Unable to verify API key", "kind": "unauthorized"}

    def test_missing_collection_reported_before_malformed_body(self, client, auth_headers):
        response = client.post(
            "/documents",
            headers=auth_headers,
            json=[{"source": "test"}],
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Missing collection_id query parameter"

    def test_non_list_body_rejected(self, client, auth_headers, fake_embedding):
        response = client.post(
            "/documents",
            params={"collection_id": "abc"},
            headers=auth_headers,
            json={"content": "hello", "source": "test"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_request"
        assert fake_embedding.calls == []
