"""Custom exceptions for Quote Card Editor."""


class QuoteCardError(Exception):
    """Base class for editor errors."""


class ImageDecodeError(QuoteCardError):
    """Raised when a background image cannot be decoded.

    The editor state is left untouched when this is raised.
    """


class TemplateExistsError(QuoteCardError):
    """Raised when saving over an existing template without confirmation."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Template "{name}" already exists')


class TemplateNotFoundError(QuoteCardError):
    """Raised when a template name is not in the store."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Template "{name}" not found')


class GenerationError(QuoteCardError):
    """Raised when quote or image generation fails upstream."""

    def __init__(self, message: str, status_code: int = 502):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GenerationInProgressError(QuoteCardError):
    """Raised when a generation of the same kind is already running."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"{kind} generation already in progress")
