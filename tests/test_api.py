"""Tests for the HTTP surface."""


def client_post(client, query):
    return client.post("/api/chat", json={"query": query})


class TestChatRoute:
    def test_search_returns_results(self, client):
        resp = client.post(
            "/api/chat", json={"query": "Find alternative care providers in Kicukiro"}
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["response"].startswith("I found 1 service provider")
        assert len(data["suggestions"]) <= 3
        assert data["results"] == [
            {
                "id": 1,
                "name": "Kicukiro Family Center",
                "services": ["Alternative Care", "Case Management"],
                "locations": ["Kicukiro"],
                "phone": "+250 788 300 100",
                "email": "info@kicukirofamily.rw",
            }
        ]
        assert "provider" not in data

    def test_provider_details(self, client):
        resp = client.post(
            "/api/chat",
            json={
                "query": "What's the phone number of Central Family Support Center",
                "conversationId": "abc-123",
            },
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["response"] == "Central Family Support Center\n\nPhone: +250 788 123 456"
        assert data["provider"]["website"] == "https://cfsc.rw"
        assert "results" not in data

    def test_greeting_has_no_results_key(self, client):
        data = client.post("/api/chat", json={"query": "hello"}).json()
        assert set(data) == {"response", "suggestions"}

    def test_missing_query(self, client):
        resp = client.post("/api/chat", json={})
        assert resp.status_code == 200
        assert resp.json()["response"].startswith("I didn't understand that.")

    def test_non_string_query(self, client):
        resp = client.post("/api/chat", json={"query": 7})
        assert resp.status_code == 200
        assert resp.json()["response"].startswith("I didn't understand that.")

    def test_store_failure_is_500(self, failing_client):
        resp = client_post(failing_client, "Find counseling in Gasabo")
        assert resp.status_code == 500
        assert resp.json()["response"].startswith("I'm sorry, I encountered an error")

    def test_greeting_survives_store_failure(self, failing_client):
        assert client_post(failing_client, "hi").status_code == 200

    def test_query_is_logged(self, client, monkeypatch):
        from app import logging_middleware

        logged = []
        monkeypatch.setattr(logging_middleware, "log_query", lambda **kw: logged.append(kw))
        client.post("/api/chat", json={"query": "Find counseling in Gasabo", "conversationId": "c1"})
        assert logged[0]["conversation_id"] == "c1"
        assert logged[0]["intent"] == "search"
        assert logged[0]["result_count"] == 1

    def test_blank_query_is_not_logged(self, client, monkeypatch):
        from app import logging_middleware

        logged = []
        monkeypatch.setattr(logging_middleware, "log_query", lambda **kw: logged.append(kw))
        client.post("/api/chat", json={"query": "  "})
        assert logged == []


class TestCatalogRoutes:
    def test_directories(self, client):
        resp = client.get("/api/public/directories")
        assert resp.status_code == 200
        directories = resp.json()["directories"]
        assert len(directories) == 5
        hope = directories[2]
        assert hope["name"] == "Hope Rehabilitation Centre"
        assert hope["paid"] is True
        assert hope["locations"][0] == {
            "districtName": "Huye",
            "sectorName": "Ngoma",
            "cellName": "Butare",
            "villageName": "Matyazo",
        }

    def test_districts(self, client):
        data = client.get("/api/districts").json()
        assert data[0] == {"id": 1, "name": "Gasabo"}
        assert len(data) == 6

    def test_service_and_beneficiary_types(self, client):
        assert len(client.get("/api/service-types").json()) == 9
        assert client.get("/api/beneficiary-types").json()[3] == {"id": 4, "name": "DISABLED"}

    def test_store_failure(self, failing_client):
        resp = failing_client.get("/api/districts")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Failed to fetch districts"}
