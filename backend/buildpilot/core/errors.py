# buildpilot/core/errors.py
from __future__ import annotations

class BuildpilotError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

class ValidationError(BuildpilotError, ValueError):
    status_code = 400

class NotAuthenticatedError(BuildpilotError):
    status_code = 401

class InsufficientCreditsError(BuildpilotError):
    status_code = 402

    def __init__(self, detail: str = "Not enough credits. Top up or upgrade your plan to keep using the assistant."):
        super().__init__(detail)

class ForbiddenError(BuildpilotError):
    status_code = 403

class NotFoundError(BuildpilotError):
    status_code = 404

class ConflictError(BuildpilotError):
    status_code = 409

class SessionBusyError(ConflictError):
    def __init__(self, detail: str = "The assistant is still working on your previous message."):
        super().__init__(detail)

class SessionClosedError(BuildpilotError):
    status_code = 410

    def __init__(self, detail: str = "This editor session has been closed."):
        super().__init__(detail)

class StoreError(BuildpilotError):
    status_code = 502
