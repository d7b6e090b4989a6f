"""Catalog data: pydantic models and JSON loaders."""
