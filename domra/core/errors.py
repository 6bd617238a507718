"""
Domra Lexicon error types
"""


class LexiconError(Exception):
    """Base class for lexicon failures"""


class LoadError(LexiconError):
    """
    Raised when the lexicon documents cannot be loaded.

    Network failures, timeouts, non-success statuses and malformed documents
    all collapse into this one error; ``resource`` names the document that
    failed when known.
    """

    def __init__(self, message: str, resource: str = None):
        super().__init__(message)
        self.resource = resource


class ExportError(LexiconError):
    """Raised when the current lexicon cannot be serialized or written"""
