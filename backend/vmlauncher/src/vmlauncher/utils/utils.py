from vmlauncher.models.operations import InstanceOperation

def singleton(class_):
    """
    Singleton decorator
    :param class_: class
    :return: class instance
    """
    instances = {}

    def get_instance(*args, **kwargs):
        if class_ not in instances:
            instances[class_] = class_(*args, **kwargs)
        return instances[class_]

    return get_instance


@singleton
class ExecutorRegister(object):
    def __init__(self):
        self._executors_cls = dict()

    def register(self, operation: InstanceOperation):
        def _register(cls):
            registered = self._executors_cls.get(operation)
            if registered is not None and registered is not cls:
                raise ValueError(f"Executor for '{operation.value}' already registered: {registered.__name__}")
            cls.operation = operation
            self._executors_cls[operation] = cls
            return cls
        return _register

    def get_executor(self, operation: InstanceOperation):
        try:
            return self._executors_cls[operation]
        except KeyError:
            raise LookupError(f"No executor registered for '{operation.value}'") from None

    def operations(self):
        return list(self._executors_cls)


executorsRegister = ExecutorRegister()
