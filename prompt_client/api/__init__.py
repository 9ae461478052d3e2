from .client import APIError, CreatePromptRequest, PromptAPIClient, PromptResponse

__all__ = ["APIError", "CreatePromptRequest", "PromptAPIClient", "PromptResponse"]
