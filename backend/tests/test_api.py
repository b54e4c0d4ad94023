"""API tests using FastAPI's TestClient."""

from urllib.parse import quote

from copilot.services.orchestrator import run_turn_stream


def _open(client) -> str:
    response = client.post("/api/chat/sessions")
    assert response.status_code == 201
    return response.json()["id"]


def _send(client, session_id, text):
    return client.post(
        f"/api/chat/sessions/{session_id}/messages",
        json={"message": text},
    )


class TestHealth:

    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok"}


class TestChatRoutes:
    """Session lifecycle, turns and agent switching."""

    def test_new_session_starts_general(self, client):
        body = client.post("/api/chat/sessions").json()
        assert body["current_agent"] == "general"
        assert body["agent_title"] == "Web UI Copilot"
        assert body["messages"] == []

    def test_unknown_session_404(self, client):
        assert client.get("/api/chat/sessions/nope").status_code == 404
        assert _send(client, "nope", "hi there").status_code == 404

    def test_turn_switches_agent(self, client):
        session_id = _open(client)
        body = _send(client, session_id, "What about diabetes treatment?").json()

        assert body["current_agent"] == "clinical"
        assert [m["sender"] for m in body["messages"]] == ["user", "agent"]
        assert body["messages"][1]["agent_type"] == "clinical"
        assert body["notices"][0]["title"] == "Agent Changed"
        assert body["messages"][1]["display_time"].endswith(("AM", "PM"))

        state = client.get(f"/api/chat/sessions/{session_id}").json()
        assert state["agent_title"] == "Clinical RAG Agent"
        assert state["context"]["agent_switched"] is True
        assert state["context"]["current_topic"] == "diabetes"
        assert len(state["messages"]) == 2

    def test_blank_message_ignored(self, client):
        session_id = _open(client)
        body = _send(client, session_id, "   ").json()
        assert body["messages"] == []
        state = client.get(f"/api/chat/sessions/{session_id}").json()
        assert state["messages"] == []

    def test_explicit_agent_switch(self, client):
        session_id = _open(client)
        url = f"/api/chat/sessions/{session_id}/agent"

        body = client.put(url, json={"agent": "food"}).json()
        assert body["current_agent"] == "food"
        assert len(body["messages"]) == 1
        assert body["notices"][0]["description"] == (
            "Switched to the Food agent"
        )

        again = client.put(url, json={"agent": "food"}).json()
        assert again["messages"] == []
        assert again["notices"] == []

    def test_unknown_agent_rejected(self, client):
        session_id = _open(client)
        response = client.put(
            f"/api/chat/sessions/{session_id}/agent",
            json={"agent": "finance"},
        )
        assert response.status_code == 422

    def test_stream(self, client):
        session_id = _open(client)
        response = client.post(
            f"/api/chat/sessions/{session_id}/messages/stream",
            json={"message": "crop prices"},
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "text/event-stream"
        )
        text = response.text
        assert text.index("event: user_message") < text.index(
            "event: agent_message"
        )
        assert "event: done" in text
        state = client.get(f"/api/chat/sessions/{session_id}").json()
        assert state["awaiting_reply"] is False

    def test_stream_rejected_while_reply_pending(self, client, registry):
        session_id = _open(client)
        session = registry.get(session_id)
        pending = run_turn_stream(session, "first question", delay=0)

        url = f"/api/chat/sessions/{session_id}/messages/stream"
        response = client.post(url, json={"message": "second question"})
        assert response.status_code == 409
        assert [m.content for m in session.messages] == ["first question"]

        list(pending)
        response = client.post(url, json={"message": "third question"})
        assert response.status_code == 200
        assert "event: agent_message" in response.text

    def test_close_session(self, client):
        session_id = _open(client)
        response = client.delete(f"/api/chat/sessions/{session_id}")
        assert response.status_code == 204
        assert client.get(f"/api/chat/sessions/{session_id}").status_code == 404

    def test_submissions_recorded_in_history(self, client):
        session_id = _open(client)
        _send(client, session_id, "A very long question about crop yields")
        history = client.get("/api/history").json()
        assert len(history) == 1
        assert history[0]["title"] == "A very long question about cro..."
        assert history[0]["active"] is True

        entry_id = history[0]["id"]
        activated = client.put(f"/api/history/{entry_id}/activate")
        assert activated.status_code == 200
        assert client.put("/api/history/nope/activate").status_code == 404


class TestVisualizationRoutes:
    """Toggle, chart type and export for the active dataset."""

    def test_toggle_without_data_warns(self, client):
        session_id = _open(client)
        body = client.post(
            f"/api/chat/sessions/{session_id}/visualization/toggle"
        ).json()
        assert body["visible"] is False
        assert body["notices"][0]["variant"] == "warning"

    def test_visualize_generated_data(self, client):
        session_id = _open(client)
        _send(client, session_id, "Show me food data in JSON format")
        base = f"/api/chat/sessions/{session_id}/visualization"

        body = client.post(f"{base}/toggle").json()
        assert body["visible"] is True
        assert body["notices"] == []
        assert body["chart"]["series"] == [
            "production", "consumption", "export",
        ]

        pie = client.put(f"{base}/chart-type", json={"chart_type": "pie"})
        assert pie.json()["chart"]["chart_type"] == "pie"
        assert len(pie.json()["chart"]["slices"]) == 3

        export = client.get(f"{base}/export")
        assert export.status_code == 200
        assert export.headers["content-disposition"] == (
            'attachment; filename="food-food-data-data.json"; '
            "filename*=UTF-8''food-food-data-data.json"
        )
        assert len(export.json()["data"]) == 10

    def test_export_non_latin_title(self, client):
        session_id = _open(client)
        _send(client, session_id, "Показать данные json")
        response = client.get(
            f"/api/chat/sessions/{session_id}/visualization/export"
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Показать General Data"
        assert response.headers["content-disposition"] == (
            'attachment; filename="general-data-data.json"; '
            "filename*=UTF-8''"
            + quote("показать-general-data-data.json", safe="")
        )

    def test_invalid_chart_type(self, client):
        session_id = _open(client)
        response = client.put(
            f"/api/chat/sessions/{session_id}/visualization/chart-type",
            json={"chart_type": "radar"},
        )
        assert response.status_code == 422

    def test_export_without_data_404(self, client):
        session_id = _open(client)
        response = client.get(
            f"/api/chat/sessions/{session_id}/visualization/export"
        )
        assert response.status_code == 404


class TestWidgetRoutes:
    """Save, list, export and delete widgets."""

    def _payload(self, food_dataset, title="Crops"):
        return {
            "title": title,
            "data": food_dataset.model_dump(),
            "chartType": "bar",
        }

    def test_save_and_list(self, client, food_dataset):
        client.post("/api/widgets", json=self._payload(food_dataset, "Old"))
        response = client.post("/api/widgets", json=self._payload(food_dataset))
        assert response.status_code == 201
        body = response.json()
        assert body["widget"]["chartType"] == "bar"
        assert body["notice"]["title"] == "Widget Saved"

        widgets = client.get("/api/widgets").json()
        assert [w["title"] for w in widgets] == ["Crops", "Old"]
        assert widgets[0]["id"] == body["widget"]["id"]

    def test_blank_title_rejected(self, client, food_dataset):
        response = client.post(
            "/api/widgets", json=self._payload(food_dataset, "  "),
        )
        assert response.status_code == 400
        assert response.json()["detail"]["variant"] == "destructive"
        assert client.get("/api/widgets").json() == []

    def test_delete_requires_confirm(self, client, food_dataset):
        widget_id = client.post(
            "/api/widgets", json=self._payload(food_dataset),
        ).json()["widget"]["id"]

        assert client.delete(f"/api/widgets/{widget_id}").status_code == 400
        assert len(client.get("/api/widgets").json()) == 1

        response = client.delete(f"/api/widgets/{widget_id}?confirm=true")
        assert response.status_code == 204
        assert client.get("/api/widgets").json() == []

    def test_delete_unknown_is_noop(self, client, food_dataset):
        client.post("/api/widgets", json=self._payload(food_dataset))
        response = client.delete("/api/widgets/missing?confirm=true")
        assert response.status_code == 204
        assert len(client.get("/api/widgets").json()) == 1

    def test_export_widget(self, client, food_dataset):
        widget_id = client.post(
            "/api/widgets", json=self._payload(food_dataset),
        ).json()["widget"]["id"]
        response = client.get(f"/api/widgets/{widget_id}/export")
        assert response.headers["content-disposition"] == (
            'attachment; filename="crop-food-data-data.json"; '
            "filename*=UTF-8''crop-food-data-data.json"
        )
        assert client.get("/api/widgets/missing/export").status_code == 404

    def test_export_accented_title(self, client, food_dataset):
        dataset = food_dataset.model_copy(update={"title": "Café Récoltes"})
        widget_id = client.post("/api/widgets", json={
            "title": "Récoltes",
            "data": dataset.model_dump(),
            "chartType": "line",
        }).json()["widget"]["id"]

        response = client.get(f"/api/widgets/{widget_id}/export")
        assert response.status_code == 200
        header = response.headers["content-disposition"]
        assert header.isascii()
        assert header == (
            'attachment; filename="cafe-recoltes-data.json"; '
            "filename*=UTF-8''caf%C3%A9-r%C3%A9coltes-data.json"
        )
