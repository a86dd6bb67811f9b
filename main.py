"""
Entry point for `uvicorn main:app`
"""
from shiftdesk.main import app  # noqa: F401
