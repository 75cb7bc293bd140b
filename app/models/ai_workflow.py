from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field


class WorkflowStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class WorkflowStepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class WorkflowType(str, Enum):
    DISEASE_DIAGNOSIS = "disease_diagnosis"
    CROP_GROWTH_MONITORING = "crop_growth_monitoring"
    SCHEME_ADVISOR = "scheme_advisor"
    WEATHER_REPORT = "weather_report"


class WorkflowStep(BaseModel):
    name: str
    status: WorkflowStepStatus = Field(default=WorkflowStepStatus.PENDING)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_ms: Optional[int] = Field(
        default=None, description="Set once the step has completed or failed."
    )
    attempts: int = 0
    error: Optional[str] = None


class AIWorkflowRun(BaseModel):
    """One run of a multi-step flow, upserted on every state change."""

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    action: str
    workflow_type: WorkflowType
    status: WorkflowStatus = WorkflowStatus.PENDING
    user_id: Optional[str] = None
    request_id: Optional[str] = Field(
        default=None, description="Client supplied X-Request-ID, for log correlation."
    )
    crop_id: Optional[str] = None
    current_step: Optional[str] = None
    steps: Dict[str, WorkflowStep] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = None


class AIWorkflowEvent(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    workflow_id: str
    action: str
    event_type: str = Field(
        description=(
            "workflow_started, step_started, step_completed, workflow_completed"
            " or workflow_failed."
        )
    )
    step: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)
    ts: datetime = Field(default_factory=datetime.utcnow)
