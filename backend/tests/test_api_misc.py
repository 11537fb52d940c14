from fastapi.testclient import TestClient


def test_health_endpoint(client):
    r = client.get("/test")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["message"] == "API is running"
    assert "timestamp" in data and "model" in data


def test_security_header_is_set(client):
    r = client.get("/test")
    assert "default-src 'self'" in r.headers["content-security-policy"]


def test_unknown_route_returns_json_404(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Endpoint not found"}


def test_unknown_conversation_returns_404(client):
    r = client.get("/api/conversation/never-created")
    assert r.status_code == 404
    data = r.json()
    assert data["success"] is False
    assert data["error"] == "Conversation not found"


def test_delete_conversation_resets_thread(client):
    client.post("/api/generate", json={"prompt": "hi", "threadID": "to-clear"})
    r = client.delete("/api/conversation/to-clear")
    assert r.status_code == 200
    assert r.json()["history"] == []
    assert client.get("/api/conversation/to-clear").json()["history"] == []

    # unknown thread is created empty
    assert client.delete("/api/conversation/brand-new").status_code == 200
    assert client.get("/api/conversation/brand-new").status_code == 200


def test_format_cv(client, service, model_client):
    model_client.replies = ["Put Experience before Education."]
    r = client.post("/api/format-cv", json={"cvData": {"name": "Alice"}, "style": "modern"})
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["response"] == "Put Experience before Education."
    prompt = model_client.calls[0]["contents"]
    assert "modern style" in prompt and '"name": "Alice"' in prompt
    assert len(service.store) == 0


def test_format_cv_requires_cv_data(client, model_client):
    r = client.post("/api/format-cv", json={"style": "professional"})
    assert r.status_code == 400
    assert r.json()["success"] is False
    assert model_client.calls == []


def test_format_cv_rejects_blank_cv_data(client, model_client):
    r = client.post("/api/format-cv", json={"cvData": "  "})
    assert r.status_code == 400
    assert model_client.calls == []


def test_improve_cv(client, service, model_client):
    body = {"cvSection": "Experience", "currentContent": "Worked on backend", "jobTitle": "SRE"}
    r = client.post("/api/improve-cv", json=body)
    assert r.status_code == 200
    assert r.json()["response"] == "reply 1"
    prompt = model_client.calls[0]["contents"]
    assert "Worked on backend" in prompt and "Target job title: SRE" in prompt
    assert len(service.store) == 0


def test_improve_cv_requires_section_and_content(client):
    r = client.post("/api/improve-cv", json={"cvSection": "Skills"})
    assert r.status_code == 400


def test_prompt_guide(client):
    r = client.get("/api/prompt-guide")
    assert r.status_code == 200
    guide = r.json()["guide"]
    assert "{prompt}" in guide["templatePlaceholders"]
    assert guide["endpoints"]["generate"]["path"] == "/api/generate"


def test_unexpected_error_returns_generic_500(client):
    from cvgen.generation import get_generation_service
    from cvgen.main import app

    class Broken:
        async def generate(self, request):
            raise RuntimeError("boom")

    app.dependency_overrides[get_generation_service] = lambda: Broken()
    raw = TestClient(app, raise_server_exceptions=False)
    r = raw.post("/api/generate", json={"prompt": "hi"})
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Internal server error", "message": "boom"}
    assert r.headers["content-security-policy"] == "default-src 'self'; worker-src 'self' blob:;"
