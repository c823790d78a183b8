# Error taxonomy shared by the pipeline and the HTTP layer.
# Each error knows the status code it maps to; the app turns it into
# {"error": message, "detail"?: detail}.

from __future__ import annotations
from typing import Optional


class FinalSayError(Exception):
    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_payload(self) -> dict:
        payload = {"error": self.message}
        if self.detail:
            payload["detail"] = self.detail
        return payload


class ClientError(FinalSayError):
    """Missing or invalid request field, or an unsupported mode."""
    status_code = 400


class MethodNotAllowed(FinalSayError):
    status_code = 405


class RateLimited(FinalSayError):
    status_code = 429


class ConfigError(FinalSayError):
    """A required backend credential is not configured."""
    status_code = 500


class UpstreamError(FinalSayError):
    """Generation or search backend returned a non-success response."""
    status_code = 500
