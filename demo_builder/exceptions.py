"""
Voice Agent Demo Builder - Exceptions
Domain errors raised by the lifecycle and demo link services
"""


class DemoBuilderError(Exception):
    """Base class for domain errors"""
    pass


class PreconditionError(DemoBuilderError):
    """Operation is not allowed for the record's current status"""

    def __init__(self, message: str, status: str = None, operation: str = None):
        super().__init__(message)
        self.status = status
        self.operation = operation


class SlugGenerationError(DemoBuilderError):
    """Could not mint a unique demo link slug"""
    pass
