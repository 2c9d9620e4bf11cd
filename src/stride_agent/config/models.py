"""
Pydantic models for Stride Agent configuration validation.

The workflow tables (lanes, work types, board parents) are organization
specific configuration. They are declared here with the values of the
reference organization and can be replaced wholesale from YAML.
"""

from typing import Dict, Optional
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StatusLabel(str, Enum):
    """Workflow stages an item can occupy, in scan order."""
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    QA_REVIEW = "QA Review"
    CODE_REVIEW = "Code Review"
    DESIGN_REVIEW = "Design Review"


class ItemType(str, Enum):
    """Work item subtypes known to the tracker."""
    EPIC = "Epic"
    STORY = "Story"
    TASK = "Task"
    BUG = "Bug"


DEFAULT_LANES: Dict[StatusLabel, str] = {
    StatusLabel.NOT_STARTED: "112ae3d2-a7a0-4bac-b17a-620c7ddb5956",
    StatusLabel.IN_PROGRESS: "5f0b83db-29e7-4466-b701-6e6ccb3379d7",
    StatusLabel.QA_REVIEW: "60ea1adf-f8e3-46ee-8fa6-415356e04168",
    StatusLabel.CODE_REVIEW: "fd33282a-6c94-4720-91e2-27963ccafb3f",
    StatusLabel.DESIGN_REVIEW: "57dd8c0d-95de-4d4a-bc08-4a31c0bb7c02",
}

DEFAULT_WORK_TYPES: Dict[ItemType, str] = {
    ItemType.EPIC: "105342df-7a2f-4386-ba7d-d17ae7e23549",
    ItemType.STORY: "633fa51c-f100-4ce9-9167-06fb1201d3c5",
    ItemType.TASK: "c36fae19-412d-4465-8bd4-8dc740477da4",
    ItemType.BUG: "281aeb23-ec70-4ef0-90f5-770493d7d838",
}


class AppConfig(BaseModel):
    """Application-level configuration settings."""

    name: str = Field(default="Stride Agent", description="Application display name")
    version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")
    verbose_logging: bool = Field(default=False, description="Enable verbose debug logging")

    log_file: Optional[str] = Field(default=None, description="Rotating JSON log file (disabled when unset)")
    max_log_size_mb: int = Field(default=10, ge=1, le=1000, description="Maximum log file size")
    backup_count: int = Field(default=5, ge=1, le=100, description="Number of backup log files")

    @field_validator('log_file')
    @classmethod
    def expand_path(cls, v):
        """Expand user home directory in paths."""
        if not v:
            return None
        return str(Path(v).expanduser())


class TrackerConfig(BaseModel):
    """Connection settings for the tracker REST API."""

    api_base: str = Field(default="https://api.devstride.com", description="API base URL")
    org_id: Optional[str] = Field(default=None, description="Organization identifier")
    api_key: Optional[str] = Field(default=None, description="Basic auth username")
    api_secret: Optional[str] = Field(default=None, description="Basic auth password")

    timeout: float = Field(default=30.0, ge=1.0, le=600.0, description="Request timeout in seconds")
    max_retries: int = Field(default=0, ge=0, le=10, description="Retries on connect/timeout errors")
    retry_delay: float = Field(default=1.0, ge=0.1, le=10.0, description="Delay between retries")

    @field_validator('api_base')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip('/')

    @property
    def base_url(self) -> str:
        """Organization-scoped API root."""
        return f"{self.api_base}/v1/organizations/{self.org_id or ''}"

    @property
    def has_credentials(self) -> bool:
        return bool(self.org_id and self.api_key and self.api_secret)


class WorkflowConfig(BaseModel):
    """Static identifier tables for the organization's workflow."""

    lanes: Dict[StatusLabel, str] = Field(
        default_factory=lambda: dict(DEFAULT_LANES),
        description="Status label to lane id"
    )
    work_types: Dict[ItemType, str] = Field(
        default_factory=lambda: dict(DEFAULT_WORK_TYPES),
        description="Item type to work type id"
    )
    board_workstreams: Dict[str, str] = Field(
        default_factory=lambda: {"2406aa12-4d39-4e3a-bd34-70f4f9a0c3fc": "F942"},
        description="Board id to parent workstream number"
    )
    boards: Dict[str, str] = Field(
        default_factory=lambda: {
            "sprint_2_q1_26": "2406aa12-4d39-4e3a-bd34-70f4f9a0c3fc",
            "sprint_3_q1_26": "bdb79b38-8b45-4460-bcce-efaa2bd2e562",
        },
        description="Named board ids"
    )

    @field_validator('lanes')
    @classmethod
    def require_every_status(cls, v):
        """Every status label must map to a lane."""
        missing = [label.value for label in StatusLabel if label not in v]
        if missing:
            raise ValueError(f"missing lane ids for: {', '.join(missing)}")
        return v


class ResolverConfig(BaseModel):
    """Entity resolution settings."""

    concurrent_board_lookups: bool = Field(
        default=False,
        description="Start per-board workstream lookups together (first board in order still wins)"
    )


class ToolsConfig(BaseModel):
    """Structured tool front-end settings."""

    timeout_seconds: float = Field(default=60.0, ge=1.0, le=600.0, description="Default timeout for tool execution")
    default_board_id: Optional[str] = Field(default=None, description="Board selected when a session starts")


class StrideAgentConfig(BaseModel):
    """Main configuration model."""

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    app: AppConfig = Field(default_factory=AppConfig)
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)

    @model_validator(mode='after')
    def validate_default_board(self):
        """A configured default board may be given by name."""
        board = self.tools.default_board_id
        if board and board in self.workflow.boards:
            self.tools.default_board_id = self.workflow.boards[board]
        return self
