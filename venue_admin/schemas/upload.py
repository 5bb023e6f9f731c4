"""
Media upload schemas
"""

from pydantic import BaseModel


class StoredMedia(BaseModel):
    """Location of a stored object"""
    url: str
    storage_key: str
