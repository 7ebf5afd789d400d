"""Exception classes for the buzzer server."""


class BuzzerError(Exception):
    """Base error for the buzzer server."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class MalformedMessage(BuzzerError):
    """Raised when an inbound socket payload cannot be parsed."""

    def __init__(self, tag, message="Malformed payload."):
        super().__init__(f"{tag}: {message}")
        self.tag = tag
