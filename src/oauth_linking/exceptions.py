class OAuthLinkingException(Exception):
    def __init__(self, error: str, error_description: str | None = None) -> None:
        self.error = error
        self.error_description = error_description


class PersistenceError(OAuthLinkingException):
    """Raised by account stores when a write or lookup cannot be completed."""

    def __init__(self, error_description: str | None = None) -> None:
        super().__init__("persistence_error", error_description)
