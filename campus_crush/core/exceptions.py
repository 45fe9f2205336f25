"""
Domain exceptions raised by services.

Routes let these propagate; the handler registered in main.py turns them
into JSON responses with the carried status code.
"""


class CampusCrushError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(CampusCrushError):
    status_code = 400


class ForbiddenError(CampusCrushError):
    status_code = 403


class NotFoundError(CampusCrushError):
    status_code = 404


class ConflictError(CampusCrushError):
    status_code = 409
