"""Paste error hierarchy. Each error knows the HTTP status it maps to."""


class PasteError(Exception):
    status_code = 500
    message = "internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class PasteTooLarge(PasteError):
    status_code = 406

    def __init__(self, max_size: int) -> None:
        super().__init__(f"paste too large (maximum size {max_size} bytes)")


class PasteTooSmall(PasteError):
    status_code = 406

    def __init__(self, min_size: int) -> None:
        super().__init__(f"paste too small (minimum size {min_size} bytes)")


class PasteNotFound(PasteError):
    status_code = 404
    message = "not found"


class InvalidNamespace(PasteError):
    status_code = 400
    message = "invalid namespace"


class HighlightError(PasteError):
    status_code = 400
    message = (
        "unknown pygments lexer shortcode. "
        "view available lexers at https://pygments.org/docs/lexers/"
    )


class StorageError(PasteError):
    status_code = 500
    message = "storage failure"
