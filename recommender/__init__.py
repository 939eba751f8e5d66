"""Backend package: catalog, document parsing, pipelines, API.

This package orchestrates document extraction, title/abstract location and
LLM scope matching against a read-only journal catalog.
"""
