"""
Integration tests for the launch/kill HTTP endpoints.

The compute SDK is replaced by a fake instances client injected through
FastAPI dependency overrides.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from google.api_core import exceptions as core_exceptions

from vmlauncher.config import Settings
from vmlauncher.main import app
from vmlauncher.routes.api import get_service
from vmlauncher.services.instance_service import InstanceService

from conftest import VM_DATA

ENDPOINTS = ["/api/launch", "/api/kill"]


@pytest.fixture
def api_settings(settings):
    return settings


@pytest.fixture
def client(api_settings, client_factory):
    app.dependency_overrides[get_service] = lambda: InstanceService(api_settings, client_factory=client_factory)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _error(response) -> str:
    return response.json()["detail"]["error"]


class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "vmlauncher"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_ping(self, client):
        assert client.get("/api/ping").json() == {"message": "pong"}


class TestRequestValidation:

    @pytest.mark.parametrize("path", ENDPOINTS)
    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_non_post_rejected(self, client, instances_client, path, method):
        response = client.request(method, path, json=VM_DATA)
        assert response.status_code == 400
        assert _error(response) == f"Bad Method {method}"
        instances_client.insert.assert_not_called()
        instances_client.delete.assert_not_called()

    @pytest.mark.parametrize("path", ENDPOINTS)
    def test_head_rejected(self, client, path):
        assert client.head(path).status_code == 400

    @pytest.mark.parametrize("path", ENDPOINTS)
    @pytest.mark.parametrize("content_type", ["text/plain", "application/x-www-form-urlencoded", "application/jsonp"])
    def test_non_json_content_type_rejected(self, client, path, content_type):
        response = client.post(path, content=b'{"name": "vm"}', headers={"Content-Type": content_type})
        assert response.status_code == 400
        assert _error(response).startswith("Bad Content Type")

    @pytest.mark.parametrize("path", ENDPOINTS)
    def test_missing_content_type_rejected(self, client, path):
        response = client.post(path, content=b'{"name": "vm"}')
        assert response.status_code == 400

    @pytest.mark.parametrize("path", ENDPOINTS)
    @pytest.mark.parametrize("body", [b"", b"{", b'{"name": vm}', b"\xff\xfe\x00"])
    def test_malformed_json_rejected(self, client, instances_client, path, body):
        response = client.post(path, content=body, headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert _error(response).startswith("Bad Post Content Parse")
        instances_client.insert.assert_not_called()

    @pytest.mark.parametrize("path", ENDPOINTS)
    @pytest.mark.parametrize("body", [b'[{"name": "vm"}]', b'"vm"', b"7", b"null"])
    def test_non_object_json_rejected(self, client, path, body):
        response = client.post(path, content=body, headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert "expected a JSON object" in _error(response)

    def test_content_type_parameters_accepted(self, client, instances_client):
        response = client.post(
            "/api/kill",
            content=b'{"project": "p", "zone": "z", "name": "vm"}',
            headers={"Content-Type": "application/json; charset=utf-8"},
        )
        assert response.status_code == 200
        instances_client.delete.assert_called_once()


class TestLaunch:

    def test_success(self, client, instances_client, operation):
        response = client.post("/api/launch", json=VM_DATA)

        assert response.status_code == 200
        assert response.json() == {
            "operation": "create",
            "status": "done",
            "project": "render-farm",
            "zone": "europe-west1-b",
            "instance": "worker-1",
        }
        request = instances_client.insert.call_args.kwargs["request"]
        assert request.instance_resource.machine_type == "zones/europe-west1-b/machineTypes/e2-small"
        assert operation.timeout is None

    def test_request_id_echoed(self, client):
        response = client.post("/api/launch", json=VM_DATA, headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"

    def test_missing_template_key(self, client, instances_client):
        response = client.post("/api/launch", json={"project": "p", "zone": "z"})
        assert response.status_code == 500
        assert "vm-template" in _error(response)
        instances_client.insert.assert_not_called()

    def test_sdk_error(self, client, instances_client):
        instances_client.insert.side_effect = core_exceptions.Forbidden("quota exceeded")
        response = client.post("/api/launch", json=VM_DATA)
        assert response.status_code == 500
        assert _error(response).startswith("unable to create instance")

    def test_unexpected_error_hidden(self, client):
        svc = MagicMock()
        svc.launch.side_effect = KeyError("instance_resource")
        app.dependency_overrides[get_service] = lambda: svc
        response = client.post("/api/launch", json=VM_DATA)
        assert response.status_code == 500
        assert _error(response) == "Internal server error"


class TestLaunchWithoutTemplate:

    @pytest.fixture
    def api_settings(self):
        return Settings(_env_file=None, vm_req_template=None, vm_kill_template=None)

    @pytest.mark.parametrize("path,variable", [("/api/launch", "VM_REQ_TEMPLATE"), ("/api/kill", "VM_KILL_TEMPLATE")])
    def test_template_not_set(self, client, path, variable):
        response = client.post(path, json=VM_DATA)
        assert response.status_code == 500
        assert _error(response) == f"{variable} not set"


class TestKill:

    def test_success(self, client, instances_client):
        response = client.post("/api/kill", json=VM_DATA)

        assert response.status_code == 200
        assert response.json()["operation"] == "delete"
        request = instances_client.delete.call_args.kwargs["request"]
        assert (request.project, request.zone, request.instance) == ("render-farm", "europe-west1-b", "worker-1")

    def test_wait_error(self, client, operation):
        operation._wait_error = core_exceptions.DeadlineExceeded("too slow")
        response = client.post("/api/kill", json=VM_DATA)
        assert response.status_code == 500
        assert _error(response).startswith("unable to wait for the operation")
