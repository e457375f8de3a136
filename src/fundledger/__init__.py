"""Multi-user mutual fund ledger: order settlement and profit/loss replay."""

__version__ = "0.1.0"
