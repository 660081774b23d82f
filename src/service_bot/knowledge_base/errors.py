"""Exceptions raised by the knowledge base."""


class KnowledgeBaseError(Exception):
    """Base class for all knowledge base errors."""


class ParseError(KnowledgeBaseError):
    """A structured import payload is malformed. The store is left untouched."""


class ConversionError(KnowledgeBaseError):
    """A rich document could not be converted into blocks. Nothing is merged."""


class ValidationError(KnowledgeBaseError):
    """An entry is missing its question or answer."""


class ConcurrencyViolation(KnowledgeBaseError):
    """A store mutation was started while the same thread was already mutating."""
