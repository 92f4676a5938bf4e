import enum


class InstanceOperation(enum.Enum):
    # Operations on a compute instance
    create = "create"  # Insert a new instance
    delete = "delete"  # Delete an existing instance
