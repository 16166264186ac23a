"""memosync: split daily-note journal entries into individual memo notes."""

__version__ = "0.3.0"
