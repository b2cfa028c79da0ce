"""Specification fields: dynamic product specification forms backed by a document store."""

__version__ = "0.1.0"
