from fastapi.testclient import TestClient
from campbook.main import app
import pytest

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert "message" in data
    assert data["code"] == "HTTP_ERROR"

def test_validation_error_is_bad_request():
    from pydantic import BaseModel

    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "INVALID_ARGUMENT"
    assert "price" in data["message"]
    assert len(data["details"]) > 0

@pytest.mark.parametrize("exc_name,status,code", [
    ("ResourceNotFoundError", 404, "NOT_FOUND"),
    ("AuthenticationError", 401, "UNAUTHENTICATED"),
    ("ForbiddenError", 403, "FORBIDDEN"),
    ("ValidationError", 400, "INVALID_ARGUMENT"),
    ("ConflictError", 400, "CONFLICT"),
    ("QuotaExceededError", 400, "QUOTA_EXCEEDED"),
    ("ExternalServiceError", 500, "EXTERNAL_SERVICE_ERROR"),
])
def test_custom_exceptions(exc_name, status, code):
    from campbook.core import exceptions

    exc_class = getattr(exceptions, exc_name)
    path = f"/test-custom-error/{exc_name}"

    @app.get(path)
    def trigger_custom_error():
        raise exc_class(message="Something specific")

    response = client.get(path)
    assert response.status_code == status
    data = response.json()
    assert data == {"success": False, "message": "Something specific", "code": code}

def test_health_reports_degraded_without_database():
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["checks"]["database"] == "unhealthy"

def test_liveness():
    assert client.get("/live").json() == {"status": "alive"}

@pytest.mark.parametrize("debug,message", [
    (False, "An internal error occurred. Please try again later."),
    (True, "connection to 10.0.0.5:27017 refused"),
])
def test_unhandled_error_hides_detail_unless_debug(monkeypatch, debug, message):
    from campbook.core.config import settings

    monkeypatch.setattr(settings, "DEBUG", debug)
    path = f"/test-unhandled-error/{debug}"

    @app.get(path)
    def trigger_unhandled_error():
        raise RuntimeError("connection to 10.0.0.5:27017 refused")

    response = TestClient(app, raise_server_exceptions=False).get(path)
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": message, "code": "INTERNAL_ERROR"}
