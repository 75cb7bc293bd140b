from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from app.collections.ai_workflow import save_ai_workflow_event, save_ai_workflow_run
from app.models.ai_workflow import (
    AIWorkflowEvent,
    AIWorkflowRun,
    WorkflowStatus,
    WorkflowStep,
    WorkflowStepStatus,
    WorkflowType,
)

logger = logging.getLogger(__name__)


class WorkflowRuntime:
    """
    Records a multi-step flow (diagnosis, weather report, scheme advisor,
    crop snap) in the audit trail.

    Every state change upserts the run document and appends one event, so
    `/workflows/{id}/events` replays the run step by step.
    """

    def __init__(
        self,
        *,
        action: str,
        workflow_type: WorkflowType,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        crop_id: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        self.workflow = AIWorkflowRun(
            action=action,
            workflow_type=workflow_type,
            user_id=user_id,
            request_id=request_id,
            crop_id=crop_id,
            metadata=metadata or {},
        )

    @property
    def id(self) -> str:
        return self.workflow.id

    @property
    def current_step(self) -> Optional[str]:
        return self.workflow.current_step

    async def start(self) -> None:
        self.workflow.status = WorkflowStatus.RUNNING
        await self._persist(
            event_type="workflow_started",
            payload={"status": self.workflow.status.value},
        )

    async def start_step(self, step: str, payload: Optional[dict[str, Any]] = None) -> None:
        step_state = self._mark_step(step, WorkflowStepStatus.IN_PROGRESS)
        step_state.attempts += 1
        await self._persist(event_type="step_started", step=step, payload=payload)

    async def complete_step(self, step: str, payload: Optional[dict[str, Any]] = None) -> None:
        self._mark_step(step, WorkflowStepStatus.COMPLETED)
        await self._persist(event_type="step_completed", step=step, payload=payload)

    async def complete(self, payload: Optional[dict[str, Any]] = None) -> None:
        self._finish(WorkflowStatus.COMPLETED)
        await self._persist(
            event_type="workflow_completed",
            step=self.workflow.current_step,
            payload=payload or {"status": self.workflow.status.value},
        )

    async def fail(
        self,
        *,
        error_message: str,
        step: Optional[str] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> None:
        target_step = step or self.workflow.current_step
        if target_step:
            self._mark_step(target_step, WorkflowStepStatus.FAILED, error=error_message)
        self._finish(WorkflowStatus.FAILED)

        logger.warning(
            "Workflow %s (%s) failed at step %s: %s",
            self.workflow.id,
            self.workflow.action,
            target_step,
            error_message,
        )
        await self._persist(
            event_type="workflow_failed",
            step=target_step,
            payload={"error": error_message, **(payload or {})},
        )

    def _mark_step(
        self,
        step: str,
        step_status: WorkflowStepStatus,
        error: Optional[str] = None,
    ) -> WorkflowStep:
        now = datetime.utcnow()
        step_state = self.workflow.steps.get(step) or WorkflowStep(name=step)
        step_state.status = step_status
        step_state.error = error

        if step_status == WorkflowStepStatus.IN_PROGRESS:
            step_state.started_at = now
            step_state.completed_at = None
            step_state.duration_ms = None
        else:
            step_state.started_at = step_state.started_at or now
            step_state.completed_at = now
            step_state.duration_ms = int(
                (now - step_state.started_at).total_seconds() * 1000
            )

        self.workflow.steps[step] = step_state
        self.workflow.current_step = step
        return step_state

    def _finish(self, workflow_status: WorkflowStatus) -> None:
        self.workflow.status = workflow_status
        self.workflow.finished_at = datetime.utcnow()

    async def _persist(
        self,
        *,
        event_type: str,
        payload: Optional[dict[str, Any]] = None,
        step: Optional[str] = None,
    ) -> None:
        await save_ai_workflow_run(self.workflow)
        await save_ai_workflow_event(
            AIWorkflowEvent(
                workflow_id=self.workflow.id,
                action=self.workflow.action,
                event_type=event_type,
                step=step,
                payload=payload or {},
            )
        )


def sanitize_http_error_message(detail: Any) -> str:
    if detail is None:
        return "Request failed"
    if isinstance(detail, str):
        return detail
    return str(detail)
