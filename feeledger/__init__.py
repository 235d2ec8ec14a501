"""School fee ledger: student records, monthly fee ledgers and public fee check."""

__version__ = "1.0.0"
