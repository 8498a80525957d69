"""Pydantic schemas for the paste API."""

from pydantic import BaseModel


class PasteCreated(BaseModel):
    """Returned on write when the client asks for JSON."""

    key: str
    namespace: str
    url: str
    size: int
