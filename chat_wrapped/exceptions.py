"""Exception hierarchy for chat acquisition and configuration errors."""


class ChatWrappedError(Exception):
    """Base exception for all chat_wrapped errors."""


# Acquisition
class AcquisitionError(ChatWrappedError):
    """Failed to obtain chat text from a file or archive."""


class ChatTextNotFoundError(AcquisitionError, FileNotFoundError):
    """Archive holds no .txt chat export entry."""


class InvalidArchiveError(AcquisitionError):
    """File is not a readable zip archive."""


class UnsupportedFileError(AcquisitionError):
    """File type is neither .txt nor .zip."""


# Configuration
class ConfigurationError(ChatWrappedError, ValueError):
    """Invalid time window, participant list or vocabulary mode."""
