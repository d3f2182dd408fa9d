"""Retrieval-augmented chat backend with short-lived conversation memory."""

__version__ = "0.1.0"
