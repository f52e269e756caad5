"""
TokiKV — Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
All configuration is validated when it is loaded, not when the cache is first used.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUPPORTED_SCHEMES = ("file:", "redis:", "redis+unix:")


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class KVConfig(BaseModel):
    """Key-value cache configuration."""

    connection: str = Field(
        default="file:./data/kv",
        description="Connection string: file:<dir>, redis://..., or redis+unix://...",
    )
    prefix: str = Field(default="", description="Namespace prepended to every normalized key")
    redis_max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")
    redis_socket_timeout: int = Field(default=5, ge=1, description="Redis socket timeout in seconds")

    model_config = ConfigDict(frozen=True)

    @field_validator("connection")
    @classmethod
    def validate_connection(cls, v: str) -> str:
        """Reject connection strings whose scheme no backend handles."""
        if not v.startswith(SUPPORTED_SCHEMES):
            raise ValueError(f"unsupported kv connection {v!r}; expected one of {', '.join(SUPPORTED_SCHEMES)}")
        return v


class TokiKVConfig(BaseModel):
    """Root configuration."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    kv: KVConfig = Field(default_factory=KVConfig)

    model_config = ConfigDict(use_enum_values=False, validate_assignment=True)
