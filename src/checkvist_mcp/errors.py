"""Exceptions raised by the Checkvist client and the task view engine."""


class CheckvistError(Exception):
    """Base class for checkvist-mcp errors."""


class RemoteError(CheckvistError, RuntimeError):
    """The Checkvist API rejected a request or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TaskNotFoundError(CheckvistError, LookupError):
    """A requested task id is not part of the fetched checklist."""

    def __init__(self, checklist_id: int, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found in checklist {checklist_id}")
        self.checklist_id = checklist_id
        self.task_id = task_id


class InvalidPageError(CheckvistError, ValueError):
    """A page number outside the available range was requested."""

    def __init__(self, page_number: int, total_pages: int) -> None:
        if total_pages == 0:
            msg = f"Invalid page {page_number}. The checklist has no top-level tasks to page."
        else:
            msg = f"Invalid page {page_number}. Valid pages: 1-{total_pages}"
        super().__init__(msg)
        self.page_number = page_number
        self.total_pages = total_pages
