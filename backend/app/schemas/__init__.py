"""Schemas — Pydantic request/response models for the API boundary."""
