"""Pydantic wire schemas and DTO <-> entity conversion functions, one module per resource."""
