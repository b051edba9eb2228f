from __future__ import annotations


class PlannerError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, error: str, message: str | None = None) -> None:
        super().__init__(message or error)
        self.error = error
        self.message = message

    def to_body(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class InvalidRequestError(PlannerError):
    status_code = 400


class LLMNotConfiguredError(PlannerError):
    """No API credential is available for the configured provider."""


class UpstreamCallError(PlannerError):
    """The model API was configured but the call failed."""
