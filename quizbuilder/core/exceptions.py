"""
Custom exceptions for the quiz builder.

Transport and parse failures are raised by the generation client and
recovered before they reach the pipeline caller.
"""

from typing import Any, Optional


class QuizBuilderException(Exception):
    """Base exception for all quiz builder errors."""
    pass


class TransportError(QuizBuilderException):
    """Raised when the call to the generation service fails or returns non-2xx."""
    
    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ParseError(QuizBuilderException):
    """Raised when generated text is not valid JSON."""
    
    def __init__(self, message: str, raw_text: Optional[str] = None):
        self.raw_text = raw_text
        super().__init__(message)


class LLMError(QuizBuilderException):
    """Raised when the upstream completion call fails."""
    
    def __init__(self, message: str, details: Any = None):
        self.details = details
        super().__init__(message)


class MissingCredentialError(LLMError):
    """Raised when no API key is configured for the upstream provider."""
    pass
