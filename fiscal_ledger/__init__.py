"""Fiscal ledger: transaction ledger with company and person entity resolution."""

__version__ = "0.1.0"
