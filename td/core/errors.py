class TdError(Exception):
    pass


class NotFoundError(TdError):
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"no todo with id {task_id}")


class ValidationError(TdError):
    pass


class ParseError(ValidationError):
    pass


class StorageError(TdError):
    pass
