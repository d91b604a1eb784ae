"""Extract and store purchase data from Netto receipt emails."""

__version__ = "0.1.0"
