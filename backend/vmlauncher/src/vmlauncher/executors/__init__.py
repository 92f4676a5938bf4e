from .base import BaseExecutor
from .compute_client import default_client_factory, open_instances_client, wait_for_extended_operation
from .instance_ops import InstanceCreator, InstanceDestroyer

__all__ = [
    "BaseExecutor",
    "default_client_factory",
    "open_instances_client",
    "wait_for_extended_operation",
    "InstanceCreator",
    "InstanceDestroyer",
]
