"""
schemas/ — Pydantic request/response models for the PharmaBroker API

Provides input validation, auto-generated OpenAPI docs, and
consistent error messages across all endpoints. Canonical entity
snapshots live in schemas/entities.py.
"""
