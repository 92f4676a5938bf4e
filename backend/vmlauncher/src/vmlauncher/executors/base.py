import time
from abc import abstractmethod
from typing import Any, Dict, Optional

from loguru import logger

from vmlauncher.config import Settings
from vmlauncher.executors.compute_client import ClientFactory, open_instances_client, wait_for_extended_operation
from vmlauncher.models.operations import InstanceOperation
from vmlauncher.utils.errors import InstanceOperationError
from vmlauncher.utils.templates import parse_rendered_request, render_request_template


class BaseExecutor:
    """
    Renders a request template, sends the resulting request to the
    instances API and waits for the operation to finish.
    """

    operation: InstanceOperation
    template_setting: str
    template_env: str
    template_name: str
    request_type: Any
    verb: str

    def __init__(self, settings: Settings, client_factory: Optional[ClientFactory] = None):
        self.settings = settings
        self.client_factory = client_factory

    def get_template(self) -> str:
        template = getattr(self.settings, self.template_setting, None)
        if not template:
            raise InstanceOperationError(f"{self.template_env} not set")
        return template

    def build_request(self, data: Dict[str, Any]):
        rendered = render_request_template(self.template_name, self.get_template(), data)
        payload = parse_rendered_request(self.template_name, rendered)
        try:
            return self.request_type.from_json(rendered, ignore_unknown_fields=True)
        except Exception as e:
            raise InstanceOperationError(
                f"{self.template_name}: cannot build {self.request_type.__name__} from {sorted(payload)}: {e}"
            ) from e

    @abstractmethod
    def call(self, client, request):
        """Send the request, return the extended operation."""

    def execute(self, data: Dict[str, Any]):
        request = self.build_request(data)
        logger.info(f"  › [Executor] {self.request_type.__name__} готов, вызов API ({self.operation.value})")
        start_time = time.time()

        with open_instances_client(self.client_factory) as client:
            try:
                operation = self.call(client, request)
            except Exception as e:
                raise InstanceOperationError(f"unable to {self.verb} instance: {e}") from e

            try:
                wait_for_extended_operation(
                    operation,
                    verbose_name=f"instance {self.operation.value}",
                    timeout=self.settings.operation_timeout,
                )
            except Exception as e:
                raise InstanceOperationError(f"unable to wait for the operation: {e}") from e

        logger.info(f"  ✔ [Executor] Операция '{self.operation.value}' завершена за {time.time() - start_time:.2f} сек.")
        return request
