"""
Exceptions raised while extracting a concept graph from the service.

They never leave ConceptGraphService: each one selects the fallback path.
"""


class ExtractionError(Exception):
    """Base exception for graph extraction failures."""

    pass


class ServiceUnavailableError(ExtractionError):
    """The text-generation service is absent, not ready, or failed."""

    pass


class ServiceTimeoutError(ExtractionError):
    """The service call exceeded its hard timeout."""

    pass


class MalformedResponseError(ExtractionError):
    """No decodable node array in the service response."""

    pass


class PromptTemplateError(ExtractionError):
    """A prompt template could not be rendered with its fields."""

    pass
