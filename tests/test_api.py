"""API endpoint tests."""

import httpx


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_requires_token(client):
    response = client.get("/api/v1/pantry")
    assert response.status_code in (401, 403)


def test_rejects_bad_token(client):
    response = client.get("/api/v1/pantry", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_turn_adds_item(client, auth_headers, mock_llm):
    mock_llm.generate_tool_call.return_value = {
        "action": "add_item",
        "payload": {"items": [{"name": "milk", "category": "fridge"}]},
        "speak": "Added milk.",
    }

    response = client.post(
        "/api/v1/assistant/turn", headers=auth_headers, json={"utterance": "add milk"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["action"] == "add_item"
    assert data["speak"] == "Added milk to the fridge."

    pantry = client.get("/api/v1/pantry", headers=auth_headers).json()
    assert [(item["name"], item["category"]) for item in pantry] == [("milk", "fridge")]


def test_turn_passes_household_size(client, auth_headers, mock_llm):
    client.post(
        "/api/v1/assistant/turn",
        headers=auth_headers,
        json={"utterance": "what can I cook", "household_size": 4, "recipe_filters": ["vegan"]},
    )

    system_prompt = mock_llm.generate_tool_call.call_args.kwargs["system_prompt"]
    assert "Household size: 4 people" in system_prompt
    assert "Vegan (no animal products)" in system_prompt


def test_pending_question_flow(client, auth_headers, mock_llm):
    mock_llm.generate_tool_call.return_value = {
        "action": "ask",
        "payload": {"pending_item": "fish"},
        "speak": "Fridge or freezer?",
    }

    asked = client.post(
        "/api/v1/assistant/turn", headers=auth_headers, json={"utterance": "add fish"}
    ).json()
    assert asked["action"] == "ask"
    assert asked["possible_categories"] == ["fridge", "freezer"]

    pending = client.get("/api/v1/assistant/pending", headers=auth_headers).json()
    assert pending["pending_item"] == "fish"

    answered = client.post(
        "/api/v1/assistant/turn", headers=auth_headers, json={"utterance": "freezer please"}
    ).json()
    assert answered["action"] == "add_item"
    assert answered["items"][0]["category"] == "freezer"

    pending = client.get("/api/v1/assistant/pending", headers=auth_headers).json()
    assert pending["pending_item"] is None


def test_cancel_endpoint(client, auth_headers, mock_llm):
    mock_llm.generate_tool_call.return_value = {"action": "ask", "payload": {"pending_item": "fish"}}
    client.post("/api/v1/assistant/turn", headers=auth_headers, json={"utterance": "add fish"})

    response = client.post("/api/v1/assistant/cancel", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["pending_item"] is None
    pending = client.get("/api/v1/assistant/pending", headers=auth_headers).json()
    assert pending["pending_item"] is None


def test_model_failure_returns_502(client, auth_headers, mock_llm):
    mock_llm.generate_tool_call.side_effect = httpx.ConnectError("connection refused")

    response = client.post(
        "/api/v1/assistant/turn", headers=auth_headers, json={"utterance": "add milk"}
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "Sorry, I couldn't process that. Please try again."
    assert client.get("/api/v1/pantry", headers=auth_headers).json() == []


def test_undo_endpoint(client, auth_headers, mock_llm):
    undo = client.post("/api/v1/assistant/undo", headers=auth_headers).json()
    assert undo == {
        "success": False,
        "message": "Nothing to undo.",
        "count": 0,
        "reversed_names": [],
    }

    mock_llm.generate_tool_call.return_value = {
        "action": "add_item",
        "payload": {"items": ["milk", "eggs"]},
    }
    client.post(
        "/api/v1/assistant/turn", headers=auth_headers, json={"utterance": "add milk and eggs"}
    )

    undo = client.post("/api/v1/assistant/undo", headers=auth_headers).json()
    assert undo["success"] is True
    assert undo["count"] == 2
    assert undo["reversed_names"] == ["milk", "eggs"]
    assert client.get("/api/v1/pantry", headers=auth_headers).json() == []


def test_classify_endpoint(client, auth_headers):
    response = client.post(
        "/api/v1/assistant/classify", headers=auth_headers, json={"item_name": "fish"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["category"] is None
    assert data["is_ambiguous"] is True
    assert data["reason"] == "ambiguous"
    assert data["question"] == "You said fish. Should that go in the fridge or freezer?"

    data = client.post(
        "/api/v1/assistant/classify", headers=auth_headers, json={"item_name": "Frozen Fish"}
    ).json()
    assert data["category"] == "freezer"
    assert data["question"] is None


def test_pantry_update_and_delete_can_be_undone(client, auth_headers, make_pantry_item):
    item = make_pantry_item("Milk")

    response = client.put(
        f"/api/v1/pantry/{item.id}",
        headers=auth_headers,
        json={"current_quantity": 1, "low_stock_threshold": 2},
    )
    assert response.status_code == 200
    assert response.json()["is_low_stock"] is True

    low = client.get("/api/v1/pantry/low-stock", headers=auth_headers).json()
    assert [row["name"] for row in low] == ["Milk"]

    response = client.delete(f"/api/v1/pantry/{item.id}", headers=auth_headers)
    assert response.status_code == 204
    assert client.get(f"/api/v1/pantry/{item.id}", headers=auth_headers).status_code == 404

    client.post("/api/v1/assistant/undo", headers=auth_headers)
    restored = client.get(f"/api/v1/pantry/{item.id}", headers=auth_headers).json()
    assert restored["name"] == "Milk"
    assert restored["is_low_stock"] is True


def test_pantry_item_not_found(client, auth_headers):
    assert client.get("/api/v1/pantry/999", headers=auth_headers).status_code == 404
    assert client.put(
        "/api/v1/pantry/999", headers=auth_headers, json={"quantity": "1"}
    ).status_code == 404
    assert client.delete("/api/v1/pantry/999", headers=auth_headers).status_code == 404


def test_shopping_list_endpoints(client, auth_headers):
    response = client.post(
        "/api/v1/shopping-list", headers=auth_headers, json={"name": "Bread", "quantity": "1 loaf"}
    )
    assert response.status_code == 201
    item_id = response.json()["id"]

    duplicate = client.post("/api/v1/shopping-list", headers=auth_headers, json={"name": "bread"})
    assert duplicate.status_code == 409

    items = client.get("/api/v1/shopping-list", headers=auth_headers).json()
    assert [item["name"] for item in items] == ["Bread"]

    assert client.delete(f"/api/v1/shopping-list/{item_id}", headers=auth_headers).status_code == 204
    assert client.get("/api/v1/shopping-list", headers=auth_headers).json() == []

    undo = client.post("/api/v1/assistant/undo", headers=auth_headers).json()
    assert undo["reversed_names"] == ["Bread"]
    assert len(client.get("/api/v1/shopping-list", headers=auth_headers).json()) == 1
