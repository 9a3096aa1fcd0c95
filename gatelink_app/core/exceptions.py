from typing import Optional, Any


class GateLinkError(Exception):
    """
    Base exception for the link service.

    Carries the HTTP status the API layer maps it to.
    """
    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class InvalidInputError(GateLinkError):
    """
    Raised when the destination URL is missing or malformed.
    """
    status_code = 400
    default_message = "Invalid URL"


class GenerationExhaustedError(GateLinkError):
    """
    Raised when every identifier candidate collided within the retry bound.
    """
    status_code = 500
    default_message = "Failed to generate unique ID"


class LinkNotFoundError(GateLinkError):
    """
    Raised when a short identifier does not resolve to a link.
    """
    status_code = 404
    default_message = "Link not found"


class CaptchaRejectedError(GateLinkError):
    """
    Raised when CAPTCHA verification fails at the final gate.
    """
    status_code = 400
    default_message = "CAPTCHA verification failed"
