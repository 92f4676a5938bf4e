"""Shared fixtures: request templates, settings and a fake instances client."""

from __future__ import annotations

from typing import List
from unittest.mock import MagicMock

import pytest
from loguru import logger

from vmlauncher.config import Settings


CREATE_TEMPLATE = (
    '{"project": "{{ project }}", "zone": "{{ zone }}", '
    '"instance_resource": {"name": "{{ name | ToLower }}", '
    '"machine_type": "zones/{{ zone }}/machineTypes/{{ machine_type }}"}}'
)
KILL_TEMPLATE = '{"project": "{{ project }}", "zone": "{{ zone }}", "instance": "{{ name | ToLower }}"}'

VM_DATA = {
    "project": "render-farm",
    "zone": "europe-west1-b",
    "name": "Worker-1",
    "machine_type": "e2-small",
}


class FakeWarning:
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message


class FakeOperation:
    """Stands in for google.api_core.extended_operation.ExtendedOperation."""

    name = "operation-1234"

    def __init__(self, error_code=None, error_message=None, warnings=(), exc=None, wait_error=None):
        self.error_code = error_code
        self.error_message = error_message
        self.warnings = list(warnings)
        self._exc = exc
        self._wait_error = wait_error
        self.timeout = "not waited"

    def result(self, timeout=None):
        self.timeout = timeout
        if self._wait_error is not None:
            raise self._wait_error
        return None

    def exception(self):
        return self._exc


@pytest.fixture
def operation() -> FakeOperation:
    return FakeOperation()


@pytest.fixture
def instances_client(operation) -> MagicMock:
    client = MagicMock(name="InstancesClient")
    client.insert.return_value = operation
    client.delete.return_value = operation
    return client


@pytest.fixture
def client_factory(instances_client):
    return lambda: instances_client


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        vm_req_template=CREATE_TEMPLATE,
        vm_kill_template=KILL_TEMPLATE,
        operation_timeout=None,
    )


@pytest.fixture
def log_messages() -> List[str]:
    messages: List[str] = []
    sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(sink_id)
