from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from google.api_core.extended_operation import ExtendedOperation
from google.cloud import compute_v1
from loguru import logger

from vmlauncher.utils.errors import InstanceOperationError

ClientFactory = Callable[[], compute_v1.InstancesClient]


def default_client_factory() -> compute_v1.InstancesClient:
    """Instances REST client using Application Default Credentials."""
    return compute_v1.InstancesClient()


@contextmanager
def open_instances_client(client_factory: Optional[ClientFactory] = None) -> Iterator[compute_v1.InstancesClient]:
    """
    Создаёт клиент Compute Engine и закрывает его транспорт после использования.

    Args:
        client_factory (Callable | None): Фабрика клиента, по умолчанию InstancesClient().

    Raises:
        InstanceOperationError: Если клиент не удалось создать (например, нет учётных данных).
    """
    factory = client_factory or default_client_factory
    try:
        client = factory()
    except Exception as e:
        raise InstanceOperationError(f"InstancesClient: {e}") from e
    try:
        yield client
    finally:
        client.transport.close()


def wait_for_extended_operation(
    operation: ExtendedOperation,
    verbose_name: str = "operation",
    timeout: Optional[float] = None,
) -> Any:
    """
    Block until a compute operation finishes.

    Args:
        operation (ExtendedOperation): Operation returned by the instances client.
        verbose_name (str): Human readable name used in log messages.
        timeout (float | None): Seconds to wait, None waits until the operation is done.

    Returns:
        Any: Whatever operation.result() returns.

    Raises:
        Exception: The operation's own exception if it finished with an error code,
            or the error raised while waiting (including a timeout).
    """
    result = operation.result(timeout=timeout)

    if operation.error_code:
        logger.error(f"  ! [Compute] Error during {verbose_name}: [Code: {operation.error_code}]: {operation.error_message}")
        logger.error(f"  ! [Compute] Operation ID: {operation.name}")
        raise operation.exception() or RuntimeError(operation.error_message)

    if operation.warnings:
        for warning in operation.warnings:
            logger.warning(f"  ! [Compute] Warning during {verbose_name}: {warning.code}: {warning.message}")

    return result
