import inspect

import pytest

from unisearch.routers import search as search_routes
from unisearch.utils.timestamps import utc_days_ago


class TestSearch:
    def _search(self, client, headers=None, **params):
        r = client.get("/api/v1/search", params=params, headers=headers or {})
        assert r.status_code == 200, r.text
        return r.json()

    def test_search_articles_by_title(self, client, seed):
        article_id = seed.article("Quantum computing breakthrough", summary="Qubits at scale")

        data = self._search(client, q="quantum")
        assert data["query"] == "quantum"
        assert data["total_count"] == 1
        result = data["results"][0]
        assert result["id"] == article_id
        assert result["type"] == "articles"
        assert result["url"].startswith("/news/quantum-computing-breakthrough")
        assert result["excerpt"] == "Qubits at scale"
        assert "Quantum" in result["highlights"]
        assert result["relevance_score"] > 0

    def test_search_spans_all_content_types_by_default(self, client, seed):
        topic_id = seed.topic("Kubernetes upgrade questions", content="How do I upgrade?")
        seed.article("Kubernetes release notes")
        seed.job("Kubernetes platform engineer")
        seed.reply(topic_id, "We run kubernetes in production")
        seed.company("Kubernetes Consulting", description="Cluster experts")
        seed.user("kubernetes_fan", display_name="Kube Fan")

        data = self._search(client, q="kubernetes")
        types = {r["type"] for r in data["results"]}
        assert types == {"articles", "forum_topics", "forum_replies", "jobs", "companies", "users"}
        assert data["content_types"] == [
            "articles", "forum_topics", "forum_replies", "jobs", "users", "companies",
        ]
        assert data["failed_content_types"] == []

    def test_type_filter_restricts_and_echoes(self, client, seed):
        seed.article("GPT-4 release notes")
        seed.job("GPT-4 prompt engineer")
        seed.topic("GPT-4 discussion thread")

        data = self._search(client, q="GPT-4", type=["articles", "jobs"])
        assert data["content_types"] == ["articles", "jobs"]
        assert data["total_count"] == 2
        assert {r["type"] for r in data["results"]} == {"articles", "jobs"}

    def test_non_live_records_are_excluded(self, client, seed):
        seed.article("Zephyr draft article", status="draft")
        seed.topic("Zephyr hidden topic", is_hidden=True)
        closed = seed.topic("Zephyr closed topic", status="closed")
        open_topic = seed.topic("Unrelated open topic")
        seed.reply(open_topic, "zephyr deleted reply", is_deleted=True)
        seed.job("Zephyr expired job", expires_at=utc_days_ago(1))
        seed.job("Zephyr draft job", status="draft")
        seed.user("zephyr_suspended", status="suspended")

        data = self._search(client, q="zephyr")
        assert data["total_count"] == 0
        assert closed not in [r["id"] for r in data["results"]]

    def test_job_with_future_expiry_is_live(self, client, seed):
        job_id = seed.job("Rust backend developer", expires_at="2999-01-01T00:00:00Z", salary_min=50000)

        data = self._search(client, q="rust", type="jobs")
        assert [r["id"] for r in data["results"]] == [job_id]
        assert data["results"][0]["metadata"]["salary"]["min"] == 50000

    def test_reply_result_shape(self, client, seed):
        topic_id = seed.topic("Async patterns")
        reply_id = seed.reply(topic_id, "Use asyncio gather to fan out requests")

        data = self._search(client, q="asyncio", type="forum_replies")
        result = data["results"][0]
        assert result["id"] == reply_id
        assert result["title"] == "Reply to: Async patterns"
        assert result["url"].endswith(f"#reply-{reply_id}")
        assert result["metadata"]["topic_id"] == topic_id

    def test_user_search_is_fuzzy_and_highlighted(self, client, seed):
        user_id = seed.user("alice_dev", display_name="Alice Johnson", headline="Python developer")

        data = self._search(client, q="alice", type="users")
        result = data["results"][0]
        assert result["id"] == user_id
        assert result["title"] == "Alice Johnson"
        assert result["excerpt"] == "Python developer"
        assert result["url"] == "/u/alice_dev"
        assert result["highlights"] == ["Alice"]

    def test_company_matches_name(self, client, seed):
        company_id = seed.company("Acme Robotics", description="Industrial robots", location="Berlin")

        data = self._search(client, q="acme", type="companies")
        result = data["results"][0]
        assert result["id"] == company_id
        assert result["title"] == "Acme Robotics"
        assert result["metadata"]["location"] == "Berlin"

    def test_sort_by_date_newest_first(self, client, seed):
        old = seed.article("Climate report", created_at="2024-01-01T00:00:00Z")
        new = seed.article("Climate summit", created_at="2025-06-01T00:00:00Z")
        mid = seed.job("Climate analyst", created_at="2025-01-01T00:00:00Z")

        data = self._search(client, q="climate", sort="date")
        assert [r["id"] for r in data["results"]] == [new, mid, old]
        assert data["sort_by"] == "date"

    def test_sort_by_popularity(self, client, seed):
        quiet = seed.article("Solar panels explained", view_count=3)
        busy = seed.topic("Solar panels on flat roofs", view_count=10, upvote_count=5)
        mid = seed.article("Solar panels and heat pumps", view_count=12)

        data = self._search(client, q="solar", sort="popularity")
        assert [r["id"] for r in data["results"]] == [busy, mid, quiet]

    def test_pagination(self, client, seed):
        for i in range(50):
            seed.article(f"Python tip number {i}")

        seen = []
        for page, expected in ((1, 20), (2, 20), (3, 10)):
            data = self._search(client, q="python", page=page, limit=20)
            assert data["total_count"] == 50
            assert data["total_pages"] == 3
            assert data["page"] == page
            assert len(data["results"]) == expected
            seen.extend(r["id"] for r in data["results"])
        assert len(set(seen)) == 50

    def test_page_past_end_is_empty(self, client, seed):
        seed.article("Lonely article")

        data = self._search(client, q="lonely", page=5)
        assert data["results"] == []
        assert data["total_count"] == 1

    def test_no_match_returns_empty(self, client):
        data = self._search(client, q="xyznonexistentterm99999")
        assert data["total_count"] == 0
        assert data["total_pages"] == 0
        assert data["results"] == []

    def test_punctuation_only_query_matches_nothing(self, client, seed):
        seed.article("C++ templates")

        data = self._search(client, q="++", type="articles")
        assert data["results"] == []

    def test_underscore_token_does_not_sink_query(self, client, seed):
        article_id = seed.article("Hello world guide")

        data = self._search(client, q="hello _", type="articles")
        assert data["total_count"] == 1
        assert data["results"][0]["id"] == article_id

    def test_empty_query_rejected(self, client):
        r = client.get("/api/v1/search?q=")
        assert r.status_code == 400

    def test_whitespace_query_rejected(self, client):
        r = client.get("/api/v1/search", params={"q": "   "})
        assert r.status_code == 400

    def test_overlong_query_rejected(self, client):
        r = client.get("/api/v1/search", params={"q": "a" * 501})
        assert r.status_code == 400

    def test_invalid_params_rejected(self, client):
        assert client.get("/api/v1/search?q=test&limit=51").status_code == 422
        assert client.get("/api/v1/search?q=test&page=0").status_code == 422
        assert client.get("/api/v1/search?q=test&type=podcasts").status_code == 422
        assert client.get("/api/v1/search?q=test&sort=random").status_code == 422


class TestSearchAnalytics:
    def test_history_recorded_for_signed_in_user(self, client, seed):
        seed.article("Quantum computing")
        h = {"X-User-Id": "user-1"}
        client.get("/api/v1/search?q=quantum", headers=h)
        client.get("/api/v1/search?q=computing&type=articles", headers=h)

        r = client.get("/api/v1/search/history", headers=h)
        assert r.status_code == 200
        history = r.json()["history"]
        assert [e["query"] for e in history] == ["computing", "quantum"]
        assert history[0]["content_types"] == ["articles"]
        assert history[0]["result_count"] == 1

    def test_anonymous_search_has_no_history(self, client):
        client.get("/api/v1/search?q=anything")
        r = client.get("/api/v1/search/history", headers={"X-User-Id": "user-1"})
        assert r.json()["history"] == []

    def test_history_requires_identity(self, client):
        r = client.get("/api/v1/search/history")
        assert r.status_code == 401

    def test_popular_searches(self, client):
        for _ in range(3):
            client.get("/api/v1/search?q=quantum")
        client.get("/api/v1/search?q=python")

        r = client.get("/api/v1/search/popular")
        assert r.status_code == 200
        popular = r.json()["popular_searches"]
        assert popular[0]["query"] == "quantum"
        assert popular[0]["count"] == 3
        assert popular[1]["query"] == "python"

    def test_click_tracking(self, client, seed):
        article_id = seed.article("Quantum computing")
        data = client.get("/api/v1/search?q=quantum").json()
        assert data["query_id"]

        r = client.post("/api/v1/search/click", json={
            "query_id": data["query_id"],
            "result_id": article_id,
            "result_type": "articles",
        })
        assert r.status_code == 200

    def test_click_on_unknown_query(self, client):
        r = client.post("/api/v1/search/click", json={
            "query_id": "missing",
            "result_id": "x",
            "result_type": "articles",
        })
        assert r.status_code == 404


class TestSuggest:
    def test_short_prefix_returns_nothing(self, client, seed):
        seed.article("Quantum computing")

        r = client.get("/api/v1/search/suggest?q=q")
        assert r.status_code == 200
        assert r.json() == {"suggestions": [], "query": "q"}

    def test_suggests_titles(self, client, seed):
        seed.article("Quantum computing breakthrough")

        r = client.get("/api/v1/search/suggest?q=Quan")
        assert r.status_code == 200
        suggestions = r.json()["suggestions"]
        assert suggestions[0]["suggestion"] == "Quantum computing breakthrough"
        assert suggestions[0]["type"] == "articles"


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestRouteHandlers:
    @pytest.mark.parametrize("name", [
        "suggest", "get_history", "get_popular", "track_click", "create_saved_search",
        "list_saved_searches", "update_saved_search", "delete_saved_search",
    ])
    def test_blocking_handlers_run_in_threadpool(self, name):
        # FastAPI runs plain def handlers off the event loop
        assert not inspect.iscoroutinefunction(getattr(search_routes, name))

    def test_fan_out_handlers_are_async(self):
        assert inspect.iscoroutinefunction(search_routes.search)
        assert inspect.iscoroutinefunction(search_routes.run_saved_search)
