"""Versioned, multi-level category trees for expense and income classification."""
