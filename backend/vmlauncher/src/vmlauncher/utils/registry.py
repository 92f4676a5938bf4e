from vmlauncher.utils.utils import executorsRegister
from vmlauncher.models.operations import InstanceOperation

def register_executor(operation: InstanceOperation):
    return executorsRegister.register(operation)
