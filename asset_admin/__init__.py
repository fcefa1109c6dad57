"""Asset inventory back-office API: spreadsheet import/export and asset labels."""

__version__ = "1.0.0"
