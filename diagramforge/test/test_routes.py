import base64
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from diagramforge.config import ServerConfig
from diagramforge.server.main import create_app
from diagramforge.server.realtime.relay import Relay
from diagramforge.server.routes import diagram_routes
from diagramforge.server.state import DiagramStore

SIGNUP = {
    "name": "Signup",
    "nodes": [
        {"id": "1", "type": "input", "position": {"x": 0, "y": 0},
         "data": {"label": "Email", "dataType": "email"}},
        {"id": "2", "type": "process", "position": {"x": 200, "y": 0},
         "data": {"functionName": "validate", "dataType": "email"}},
        {"id": "3", "type": "output", "position": {"x": 400, "y": 0},
         "data": {"label": "Result"}},
    ],
    "connections": [{"id": "e1", "source": "1", "target": "2"},
                    {"id": "e2", "source": "2", "target": "3"}],
    "settings": {"componentName": "SignupForm", "useTypeScript": True, "useHooks": True},
}


class TestDiagramRoutes:

    @pytest.fixture
    def published(self):
        return []

    @pytest.fixture
    def client(self, tmp_path, published):
        relay = Relay()
        relay.subscribe(lambda event, payload: published.append((event, payload)))
        config = ServerConfig(temp_dir=str(tmp_path))
        app = create_app(config, store=DiagramStore(), relay=relay)
        return TestClient(app)

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_crud_cycle(self, client):
        created = client.post("/api/diagrams", json=SIGNUP)
        assert created.status_code == 201
        diagram_id = created.json()["id"]
        assert diagram_id == 1

        assert client.get(f"/api/diagrams/{diagram_id}").json()["name"] == "Signup"
        assert len(client.get("/api/diagrams").json()) == 1

        updated = client.put(f"/api/diagrams/{diagram_id}", json={"name": "Renamed"})
        assert updated.status_code == 200
        assert updated.json()["name"] == "Renamed"
        assert updated.json()["nodes"] == SIGNUP["nodes"]

        assert client.delete(f"/api/diagrams/{diagram_id}").status_code == 204
        assert client.get(f"/api/diagrams/{diagram_id}").status_code == 404

    def test_missing_diagram(self, client):
        assert client.get("/api/diagrams/99").status_code == 404
        assert client.put("/api/diagrams/99", json={"name": "x"}).status_code == 404
        assert client.delete("/api/diagrams/99").status_code == 404

    def test_invalid_diagram_body(self, client):
        assert client.post("/api/diagrams", json={"nodes": []}).status_code == 422

    def test_generate(self, client):
        body = {k: SIGNUP[k] for k in ("nodes", "connections", "settings")}
        response = client.post("/api/generate", json=body)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert "result = validate(email);" in data["code"]
        assert data["code"].endswith("export default SignupForm;")

    def test_generate_without_component_name(self, client):
        response = client.post("/api/generate", json={"nodes": [], "settings": {}})
        assert response.status_code == 400
        assert response.json()["message"] == "Code generation failed"
        assert "componentName" in response.json()["error"]

    def test_generate_with_bad_node_type(self, client):
        body = {"nodes": [{"id": "1", "type": "widget"}], "settings": {"componentName": "X"}}
        response = client.post("/api/generate", json=body)
        assert response.status_code == 400
        assert "unknown node type" in response.json()["error"]

    def test_generate_with_non_text_label(self, client):
        body = {"nodes": [{"id": "1", "type": "input", "data": {"label": 42}}],
                "settings": {"componentName": "X"}}
        response = client.post("/api/generate", json=body)
        assert response.status_code == 400
        assert response.json()["message"] == "Code generation failed"
        assert "label must be a string" in response.json()["error"]

    def test_generate_with_unreadable_position(self, client):
        body = {"nodes": [{"id": "1", "type": "input", "position": {"x": None, "y": "top"}}],
                "settings": {"componentName": "X"}}
        response = client.post("/api/generate", json=body)
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_unexpected_generation_error_is_a_failure_response(self, client, monkeypatch):
        def explode(data):
            raise RuntimeError("emitter blew up")

        monkeypatch.setattr(diagram_routes, "generate_from_dict", explode)
        body = {k: SIGNUP[k] for k in ("nodes", "connections", "settings")}
        response = client.post("/api/generate", json=body)
        assert response.status_code == 400
        assert response.json() == {"message": "Code generation failed", "error": "emitter blew up"}

        diagram_id = client.post("/api/diagrams", json=SIGNUP).json()["id"]
        response = client.post(f"/api/diagrams/{diagram_id}/generate")
        assert response.status_code == 400
        assert client.get(f"/api/diagrams/{diagram_id}/code").status_code == 404

    def test_generate_for_stored_diagram(self, client, published):
        diagram_id = client.post("/api/diagrams", json=SIGNUP).json()["id"]
        response = client.post(f"/api/diagrams/{diagram_id}/generate")
        assert response.status_code == 200
        saved = response.json()
        assert saved["diagramId"] == diagram_id
        assert saved["componentName"] == "SignupForm"

        latest = client.get(f"/api/diagrams/{diagram_id}/code").json()
        assert latest["code"] == saved["code"]
        assert published[-1][0] == "code-generated"
        assert published[-1][1]["diagramId"] == diagram_id

    def test_no_code_yet(self, client):
        diagram_id = client.post("/api/diagrams", json=SIGNUP).json()["id"]
        assert client.get(f"/api/diagrams/{diagram_id}/code").status_code == 404

    def test_save_generated_code(self, client):
        response = client.post("/api/generate-code",
                               json={"diagramId": 1, "code": "x", "componentName": "X"})
        assert response.status_code == 200
        assert response.json()["language"] == "typescript"

    def test_compile_code(self, client, tmp_path):
        body = {k: SIGNUP[k] for k in ("nodes", "connections", "settings")}
        code = client.post("/api/generate", json=body).json()["code"]
        result = client.post("/api/compile-code",
                             json={"code": code, "componentName": "SignupForm"}).json()
        assert result["success"] is True
        assert (tmp_path / "SignupForm.tsx").exists()

    def test_compile_bad_code(self, client):
        result = client.post("/api/compile-code",
                             json={"code": "}}} {{{", "componentName": "Bad"}).json()
        assert result["success"] is False
        assert result["logs"]

    def test_analyze_mockup(self, client):
        buf = io.BytesIO()
        Image.new("RGB", (20, 20), "white").save(buf, format="PNG")
        image = base64.b64encode(buf.getvalue()).decode()
        response = client.post("/api/analyze-mockup",
                               json={"image": image, "componentName": "Landing"})
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert "export default Landing;" in response.json()["code"]

    def test_analyze_bad_mockup(self, client):
        response = client.post("/api/analyze-mockup", json={"image": "%%%"})
        assert response.status_code == 400
        assert response.json()["success"] is False
