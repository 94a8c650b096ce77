"""Weighted, condition-gated loot selection and probability analysis."""

__version__ = "1.0.0"
