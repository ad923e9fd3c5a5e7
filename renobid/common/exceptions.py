import enum

from fastapi import HTTPException, status


class RenobidException(HTTPException):
    """Base for every error rendered to API clients.

    ``code`` is the machine-readable identifier clients switch on; ``detail``
    stays human-readable.
    """

    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        detail: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        code: str | enum.Enum | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        if code:
            self.code = code.value if isinstance(code, enum.Enum) else code


class NotFoundError(RenobidException):
    def __init__(self, resource: str, resource_id: str | None = None, code: str | enum.Enum | None = None):
        detail = f"{resource} not found"
        if resource_id:
            detail = f"{resource} '{resource_id}' not found"
        code = code or f"{resource.upper().replace(' ', '_')}_NOT_FOUND"
        super().__init__(detail=detail, status_code=status.HTTP_404_NOT_FOUND, code=code)


class PermissionDeniedError(RenobidException):
    code = "FORBIDDEN"

    def __init__(
        self,
        detail: str = "You do not have permission to perform this action",
        code: str | enum.Enum | None = None,
    ):
        super().__init__(detail=detail, status_code=status.HTTP_403_FORBIDDEN, code=code)


class BadRequestError(RenobidException):
    code = "BAD_REQUEST"

    def __init__(self, detail: str, code: str | enum.Enum | None = None):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST, code=code)


class ConflictError(RenobidException):
    code = "CONFLICT"

    def __init__(self, detail: str, code: str | enum.Enum | None = None):
        super().__init__(detail=detail, status_code=status.HTTP_409_CONFLICT, code=code)
