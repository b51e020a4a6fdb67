"""
Pydantic request/response schemas.
"""
