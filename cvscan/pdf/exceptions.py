class ExtractionError(Exception):
    """Raised when document bytes cannot be parsed into text."""
