"""Pydantic models for API requests and responses."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from datetime import datetime

from ..models.migration import MigrationMode, MigrationStatus


# Request Models
class MigrationCreate(BaseModel):
    src: str
    dst: str
    transformer: str = "dnd"
    verify: bool = False
    pool_size: int = Field(default=50, ge=1)
    scan_count: int = Field(default=1000, ge=1)
    restore_ttl: bool = True
    read_only: bool = False
    count_keys: bool = True


# Response Models
class MigrationResponse(BaseModel):
    id: str
    status: MigrationStatus
    mode: MigrationMode
    transformer: str
    pattern: str
    read_only: bool = False
    approximate_total: Optional[int] = None
    success_count: int = 0
    failure_count: int = 0
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    failed_keys_file: Optional[str] = None
    errors: List[Dict[str, Any]] = Field(default_factory=list)


class MigrationListResponse(BaseModel):
    migrations: List[MigrationResponse]
    total: int


class TransformerInfo(BaseModel):
    name: str
    pattern: str


class TransformerListResponse(BaseModel):
    transformers: List[TransformerInfo]
