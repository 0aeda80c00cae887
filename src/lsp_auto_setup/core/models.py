"""
Data models for LSP Auto Setup.

Defines Pydantic models for the persisted server cache, resolved server
configurations, stop policy and the records produced by a setup run.
"""

import time
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, Set, Union

from pydantic import BaseModel, Field, StrictStr, field_validator


class CacheRecord(BaseModel):
    """Persisted list of discovered servers."""

    timestamp: float = Field(description="Unix time of the write that produced this record")
    servers: List[StrictStr] = Field(description="Discovered server identifiers")

    @field_validator("timestamp", mode="before")
    @classmethod
    def validate_timestamp(cls, v: Any) -> Any:
        """Reject booleans and strings that pydantic would coerce."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("timestamp must be a number")
        return v

    def is_expired(self, ttl: float, now: Optional[float] = None) -> bool:
        """Check if the record is older than ``ttl`` seconds."""
        now = time.time() if now is None else now
        return not (now - self.timestamp < ttl)


class CallableTransform(BaseModel):
    """User override function for a server's default configuration."""

    kind: Literal["callable"] = "callable"
    func: Callable[..., Any] = Field(description="Receives the default config, returns overrides")

    def __call__(self, default_config: Dict[str, Any]) -> Any:
        return self.func(default_config)


class InvalidTransform(BaseModel):
    """A ``server_config`` entry that is not callable."""

    kind: Literal["invalid"] = "invalid"
    type_name: str = Field(description="Type of the value that was supplied")


ServerTransform = Union[CallableTransform, InvalidTransform]


def to_transform(value: Any) -> ServerTransform:
    """Classify a raw ``server_config`` value."""
    if isinstance(value, (CallableTransform, InvalidTransform)):
        return value
    if callable(value):
        return CallableTransform(func=value)
    return InvalidTransform(type_name=type(value).__name__)


class ResolvedConfig(BaseModel):
    """Merged configuration of one server and the command it runs."""

    command_path: Optional[str] = Field(default=None, description="Executable to probe")
    settings: Dict[str, Any] = Field(default_factory=dict, description="Merged settings")


class StopPolicy(BaseModel):
    """Policy for stopping servers that have no attached buffers."""

    enabled: bool = Field(default=True, description="Stop unused servers")
    exclude: Set[str] = Field(default_factory=set, description="Servers never stopped")


class DetachEvent(BaseModel):
    """A buffer detached from a running client."""

    client_id: int
    buffer_id: int


class SetupReport(BaseModel):
    """Outcome of one setup run."""

    from_cache: bool = Field(default=False, description="Whether a valid cache was used")
    activated: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list, description="Excluded or deprecated")
    unavailable: List[str] = Field(default_factory=list, description="No command or executable")
    failed: List[str] = Field(default_factory=list, description="Configuration errors")
    discovered: List[str] = Field(default_factory=list, description="Identifiers written to the cache")
    cache_written: bool = False

    def __str__(self) -> str:
        source = "cache" if self.from_cache else "registry"
        return (
            f"{len(self.activated)} activated, {len(self.skipped)} skipped, "
            f"{len(self.unavailable)} unavailable, {len(self.failed)} failed ({source})"
        )


class ClearCacheResult(str, Enum):
    """Outcome of clearing the cache file."""

    NOT_FOUND = "not_found"
    CLEARED = "cleared"
    ERROR = "error"
