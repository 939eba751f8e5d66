"""Pipelines for manuscript analysis and catalog seeding.

Each step is callable on its own so the text endpoint can skip extraction
and location, and init_db.py can seed without the API running.
"""
