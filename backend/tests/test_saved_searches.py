class TestSavedSearches:
    U1 = {"X-User-Id": "user-1"}
    U2 = {"X-User-Id": "user-2"}

    def _create(self, client, headers, **overrides):
        body = {"name": "AI news", "query": "GPT-4", "content_types": ["articles"], "sort_by": "date"}
        body.update(overrides)
        return client.post("/api/v1/search/saved", json=body, headers=headers)

    def test_create_and_list(self, client):
        r = self._create(client, self.U1)
        assert r.status_code == 201
        data = r.json()
        assert data["name"] == "AI news"
        assert data["content_types"] == ["articles"]
        assert data["sort_by"] == "date"
        assert data["notification_enabled"] is False

        r = client.get("/api/v1/search/saved", headers=self.U1)
        assert r.status_code == 200
        assert [s["id"] for s in r.json()["saved_searches"]] == [data["id"]]

    def test_list_is_per_user(self, client):
        self._create(client, self.U1)
        r = client.get("/api/v1/search/saved", headers=self.U2)
        assert r.json()["saved_searches"] == []

    def test_duplicate_name_conflicts(self, client):
        self._create(client, self.U1)
        r = self._create(client, self.U1, query="something else")
        assert r.status_code == 409

    def test_same_name_for_different_users(self, client):
        assert self._create(client, self.U1).status_code == 201
        assert self._create(client, self.U2).status_code == 201

    def test_requires_identity(self, client):
        assert self._create(client, {}).status_code == 401
        assert client.get("/api/v1/search/saved").status_code == 401

    def test_create_validation(self, client):
        assert self._create(client, self.U1, name="").status_code == 422
        assert self._create(client, self.U1, query="q" * 501).status_code == 422
        assert self._create(client, self.U1, content_types=["podcasts"]).status_code == 422

    def test_blank_query_rejected(self, client):
        assert self._create(client, self.U1, query="   ").status_code == 422

        saved = self._create(client, self.U1).json()
        r = client.put(f"/api/v1/search/saved/{saved['id']}", json={"query": "  "}, headers=self.U1)
        assert r.status_code == 422

    def test_query_is_stored_trimmed(self, client):
        r = self._create(client, self.U1, query="  GPT-4  ")
        assert r.status_code == 201
        assert r.json()["query"] == "GPT-4"

    def test_update(self, client):
        saved = self._create(client, self.U1).json()

        r = client.put(f"/api/v1/search/saved/{saved['id']}", json={
            "query": "Claude",
            "notification_enabled": True,
        }, headers=self.U1)
        assert r.status_code == 200
        data = r.json()
        assert data["query"] == "Claude"
        assert data["notification_enabled"] is True
        assert data["name"] == "AI news"
        assert data["content_types"] == ["articles"]

    def test_update_can_clear_sort(self, client):
        saved = self._create(client, self.U1).json()
        r = client.put(f"/api/v1/search/saved/{saved['id']}", json={"sort_by": None}, headers=self.U1)
        assert r.json()["sort_by"] is None

    def test_update_rename_conflict(self, client):
        self._create(client, self.U1, name="First")
        second = self._create(client, self.U1, name="Second").json()

        r = client.put(f"/api/v1/search/saved/{second['id']}", json={"name": "First"}, headers=self.U1)
        assert r.status_code == 409

    def test_update_other_users_search(self, client):
        saved = self._create(client, self.U1).json()
        r = client.put(f"/api/v1/search/saved/{saved['id']}", json={"query": "x"}, headers=self.U2)
        assert r.status_code == 404

    def test_delete(self, client):
        saved = self._create(client, self.U1).json()

        r = client.delete(f"/api/v1/search/saved/{saved['id']}", headers=self.U1)
        assert r.status_code == 200

        r = client.get("/api/v1/search/saved", headers=self.U1)
        assert r.json()["saved_searches"] == []

    def test_delete_by_other_user_leaves_record(self, client):
        saved = self._create(client, self.U1).json()

        r = client.delete(f"/api/v1/search/saved/{saved['id']}", headers=self.U2)
        assert r.status_code == 404

        r = client.get("/api/v1/search/saved", headers=self.U1)
        assert [s["id"] for s in r.json()["saved_searches"]] == [saved["id"]]

    def test_delete_missing(self, client):
        r = client.delete("/api/v1/search/saved/does-not-exist", headers=self.U1)
        assert r.status_code == 404

    def test_run_saved_search(self, client, seed):
        article_id = seed.article("GPT-4 release notes")
        seed.job("GPT-4 prompt engineer")
        saved = self._create(client, self.U1).json()

        r = client.get(f"/api/v1/search/saved/{saved['id']}/results", headers=self.U1)
        assert r.status_code == 200
        data = r.json()
        assert data["content_types"] == ["articles"]
        assert data["sort_by"] == "date"
        assert [res["id"] for res in data["results"]] == [article_id]

    def test_run_other_users_saved_search(self, client):
        saved = self._create(client, self.U1).json()
        r = client.get(f"/api/v1/search/saved/{saved['id']}/results", headers=self.U2)
        assert r.status_code == 404
