"""Exceptions raised by the prompt service core."""


class PromptServiceError(Exception):
    """Base class for prompt service errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class PromptValidationError(PromptServiceError):
    """Client input is malformed. Raised before any store or cache access."""


class PromptNotFoundError(PromptServiceError):
    """No prompt exists with the requested id."""

    def __init__(self, prompt_id: str):
        self.prompt_id = prompt_id
        super().__init__("Prompt not found")
