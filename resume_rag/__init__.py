"""Résumé screening assistant: analyze a résumé, score a job catalog, filter the matches."""

__version__ = "0.1.0"
