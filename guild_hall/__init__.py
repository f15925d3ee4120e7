"""Guild Hall client service: sessions, commissions and meetings over the guild daemon."""

__version__ = "0.1.0"
