class EVGridError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    stage = None  # set by the CSV ingest pipeline

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedFilter(EVGridError):
    status_code = 400


class MalformedInput(EVGridError):
    status_code = 400


class IncompleteData(EVGridError):
    status_code = 400


class NotFound(EVGridError):
    status_code = 404


class ValidationFailure(EVGridError):
    status_code = 400


class InternalFailure(EVGridError):
    status_code = 500
