class InstanceOperationError(RuntimeError):
    """Raised when an instance request cannot be built, sent or completed."""
