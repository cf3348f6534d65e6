"""Pydantic schemas for cache registry endpoints."""

from typing import List, Optional
from pydantic import BaseModel


class CreateEntryRequest(BaseModel):
    """Request model for entry creation."""
    path: str


class EntryIdResponse(BaseModel):
    """Response model for entry lookup and creation."""
    entry_id: int


class EntryResponse(BaseModel):
    """Response model for a full entry record."""
    entry_id: int
    path: str
    replica_hosts: List[str] = []


class NetAddress(BaseModel):
    """Host holding a replica of an entry."""
    host: str
    port: Optional[int] = None


class LocationsResponse(BaseModel):
    """Response model for replica locations of an entry."""
    locations: List[NetAddress] = []
