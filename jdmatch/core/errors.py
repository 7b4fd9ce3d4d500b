from __future__ import annotations


class InputValidationError(ValueError):
    """Rejected submission input, raised before any external call."""

    title = "Invalid input."

    def __init__(self, message: str, *, code: str = "invalid_input"):
        super().__init__(message)
        self.code = code

    def to_payload(self) -> dict[str, str]:
        return {"code": self.code, "error": self.title, "detail": str(self)}


class DocumentExtractionError(InputValidationError):
    title = "Could not read the resume."

    def __init__(self, message: str, *, code: str = "extraction_failed"):
        super().__init__(message, code=code)


class SessionStateError(RuntimeError):
    """Operation needs state the session does not hold yet."""
