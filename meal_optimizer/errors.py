"""
Error taxonomy shared by every router and service.

Each error is an ``HTTPException`` so FastAPI can surface it directly, but it
also carries a stable ``kind`` that clients switch on. The handler registered in
``main`` renders them as ``{"success": false, "error": kind, "message": ...}``.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class MealPlanError(HTTPException):
    kind = "ServerError"
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=self.status_code_default, detail=message)
        self.message = message
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        body = {"success": False, "error": self.kind, "message": self.message}
        body.update(self.extra)
        return body


class ValidationError(MealPlanError):
    kind = "ValidationError"
    status_code_default = status.HTTP_400_BAD_REQUEST


class Unauthenticated(MealPlanError):
    kind = "Unauthenticated"
    status_code_default = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication required", extra: Optional[Dict[str, Any]] = None):
        super().__init__(message, extra)
        self.headers = {"WWW-Authenticate": "Bearer"}


class NotFound(MealPlanError):
    kind = "NotFound"
    status_code_default = status.HTTP_404_NOT_FOUND


class NeedsGeneration(NotFound):
    """No plan cached for the requested week yet"""
    kind = "NeedsGeneration"


class InsufficientData(MealPlanError):
    kind = "InsufficientData"
    status_code_default = status.HTTP_400_BAD_REQUEST


class UpstreamUnavailable(MealPlanError):
    kind = "UpstreamUnavailable"
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE


class UpstreamTimeout(MealPlanError):
    kind = "UpstreamTimeout"
    status_code_default = status.HTTP_504_GATEWAY_TIMEOUT


class UpstreamError(MealPlanError):
    kind = "UpstreamError"
    status_code_default = status.HTTP_502_BAD_GATEWAY


class InvalidUpstreamResponse(MealPlanError):
    kind = "InvalidUpstreamResponse"
    status_code_default = status.HTTP_502_BAD_GATEWAY
