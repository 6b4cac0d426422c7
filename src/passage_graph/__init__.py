"""Passage Graph - link parsing and canvas layout for hypertext stories."""

__version__ = "0.1.0"
