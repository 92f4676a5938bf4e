from google.cloud import compute_v1
from loguru import logger

from vmlauncher.executors.base import BaseExecutor
from vmlauncher.models.operations import InstanceOperation
from vmlauncher.utils.registry import register_executor


@register_executor(operation=InstanceOperation.create)
class InstanceCreator(BaseExecutor):
    """
    Creates an instance from the VM_REQ_TEMPLATE template.
    """

    template_setting = "vm_req_template"
    template_env = "VM_REQ_TEMPLATE"
    template_name = "vm-template"
    request_type = compute_v1.InsertInstanceRequest
    verb = "create"

    def call(self, client: compute_v1.InstancesClient, request: compute_v1.InsertInstanceRequest):
        logger.info(f"  › [Executor] Создание инстанса '{request.instance_resource.name}' в {request.project}/{request.zone}")
        return client.insert(request=request)

    def execute(self, data):
        request = super().execute(data)
        logger.info("Instance created")
        return request


@register_executor(operation=InstanceOperation.delete)
class InstanceDestroyer(BaseExecutor):
    """
    Deletes an instance described by the VM_KILL_TEMPLATE template.
    """

    template_setting = "vm_kill_template"
    template_env = "VM_KILL_TEMPLATE"
    template_name = "vm-kill-template"
    request_type = compute_v1.DeleteInstanceRequest
    verb = "delete"

    def call(self, client: compute_v1.InstancesClient, request: compute_v1.DeleteInstanceRequest):
        logger.info(f"  › [Executor] Удаление инстанса '{request.instance}' в {request.project}/{request.zone}")
        return client.delete(request=request)

    def execute(self, data):
        request = super().execute(data)
        logger.info("Instance deleted")
        return request
