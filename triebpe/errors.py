class BPEError(Exception):
    """Base class for tokenizer errors."""


class InvalidInputError(BPEError, TypeError):
    """Training corpus is not text."""


class EmptyQueueError(BPEError, IndexError):
    """Extraction from an empty priority queue."""


class StorageError(BPEError, OSError):
    """Vocabulary could not be read, parsed or written."""
