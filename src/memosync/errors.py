"""Exception types raised by memosync."""


class MemoSyncError(Exception):
    """Base class for memosync errors."""


class ConfigurationError(MemoSyncError):
    """Invalid or incomplete configuration."""


class EntryParseError(MemoSyncError):
    """A timestamp line matched the entry pattern but is not a valid date."""


class ConversionError(MemoSyncError):
    """An entry could not be turned into a memo note."""


class StorageError(MemoSyncError):
    """A storage operation failed (write error, path collision)."""
