"""Exceptions raised by the edition consistency core."""


class EpaperError(Exception):
    """Base class for all e-paper domain errors."""


class ValidationError(EpaperError):
    """Caller-correctable input problem.

    Carries human-readable messages keyed by the offending input field, and
    optionally the publish blockers that prevented a status transition.
    """

    def __init__(self, errors: dict[str, list[str]], blockers: list[str] | None = None):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        self.blockers = list(blockers) if blockers is not None else []
        super().__init__(self.message)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})

    @property
    def message(self) -> str:
        for messages in self.errors.values():
            if messages:
                return messages[0]
        return "The given data was invalid."


class NotFoundError(EpaperError):
    """The primary row an operation acts on does not exist."""

    def __init__(self, resource: str, resource_id: int):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} not found")
