"""
Error kinds raised by the workflows and adapters.

Each kind carries the HTTP status it is rendered with by main.py.
"""


class JobBoardError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(JobBoardError):
    status_code = 400


class PaymentRequired(JobBoardError):
    status_code = 402


class NotFound(JobBoardError):
    status_code = 404


class Conflict(JobBoardError):
    status_code = 409


class Internal(JobBoardError):
    status_code = 500
