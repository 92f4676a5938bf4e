from typing import Any, Dict, Optional
from loguru import logger

from vmlauncher.config import Settings
from vmlauncher.executors.compute_client import ClientFactory
from vmlauncher.models.instance_models import InstanceOperationResponse
from vmlauncher.models.operations import InstanceOperation
from vmlauncher.utils.utils import executorsRegister

# Executors register themselves on import
import vmlauncher.executors.instance_ops  # noqa: F401


class InstanceService:
    def __init__(self, settings: Settings, client_factory: Optional[ClientFactory] = None):
        self.settings = settings
        self.client_factory = client_factory

    def _run(self, operation: InstanceOperation, data: Dict[str, Any]) -> InstanceOperationResponse:
        ctx_logger = logger.bind(operation=operation.value)
        ctx_logger.info(f"► [Service] Начало операции '{operation.value}'")

        executor_cls = executorsRegister.get_executor(operation)
        executor = executor_cls(self.settings, client_factory=self.client_factory)
        request = executor.execute(data)

        if operation is InstanceOperation.create:
            instance = request.instance_resource.name
        else:
            instance = request.instance

        ctx_logger.info(f"✔ [Service] Операция '{operation.value}' выполнена для инстанса '{instance}'")
        return InstanceOperationResponse(
            operation=operation.value,
            project=request.project or None,
            zone=request.zone or None,
            instance=instance or None,
        )

    def launch(self, data: Dict[str, Any]) -> InstanceOperationResponse:
        """Create an instance from the request data."""
        return self._run(InstanceOperation.create, data)

    def kill(self, data: Dict[str, Any]) -> InstanceOperationResponse:
        """Delete the instance described by the request data."""
        return self._run(InstanceOperation.delete, data)
