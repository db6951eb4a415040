from fastapi.testclient import TestClient
from voucherdesk.main import app
import pytest

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert "code" in data
    assert data["code"] == "HTTP_ERROR"

def test_405_method_not_allowed():
    response = client.patch("/ping")
    assert response.status_code == 405
    assert response.json()["code"] == "HTTP_ERROR"

def test_validation_error_structure():
    # Path parameter typed as int
    response = client.delete("/vouchers/not-a-number")
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert "details" in data
    assert len(data["details"]) > 0

def test_custom_exception():
    from voucherdesk.core.exceptions import ResourceNotFoundError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ResourceNotFoundError(message="Item not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["error"] == "Item not found"

@pytest.mark.parametrize("error_path, status, code", [
    ("voucher", 404, "VOUCHER_NOT_FOUND"),
    ("row", 409, "ROW_NOT_FOUND"),
    ("category", 400, "INVALID_CATEGORY"),
    ("provisioning", 502, "PROVISIONING_FAILED"),
    ("upstream", 502, "UPSTREAM_WRITE_FAILED"),
    ("render", 500, "RENDER_FAILED"),
    ("auth", 401, "AUTHENTICATION_FAILED"),
])
def test_domain_errors_map_to_status(error_path, status, code):
    from voucherdesk.core import exceptions

    errors = {
        "voucher": exceptions.VoucherNotFoundError,
        "row": exceptions.RowNotFoundError,
        "category": exceptions.InvalidCategoryError,
        "provisioning": exceptions.ProvisioningError,
        "upstream": exceptions.UpstreamWriteError,
        "render": exceptions.RenderError,
        "auth": exceptions.AuthenticationError,
    }

    @app.get(f"/test-domain-error/{error_path}")
    def trigger_domain_error():
        raise errors[error_path](details={"step": "test"})

    response = client.get(f"/test-domain-error/{error_path}")
    assert response.status_code == status
    data = response.json()
    assert data["code"] == code
    assert data["details"] == {"step": "test"}

def test_unhandled_exception_is_internal_error():
    @app.get("/test-unhandled-error")
    def trigger_unhandled_error():
        raise RuntimeError("boom")

    response = TestClient(app, raise_server_exceptions=False).get("/test-unhandled-error")
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
