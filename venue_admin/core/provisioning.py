"""
Venue provisioning steps

Side effects of venue creation (image relocation, payment account) run
after the venue row is committed. Each step's outcome is persisted as a
VenueProvisioningStep row so a partially provisioned venue is visible and
its failed steps can be re-run later. Steps never roll back the venue.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession

from venue_admin.config import settings
from venue_admin.core.exceptions import VenueAdminException
from venue_admin.core.metrics import PROVISIONING_STEP_FAILURES
from venue_admin.models.base import utcnow
from venue_admin.models.provisioning import (
    ProvisioningStepName,
    ProvisioningStepStatus,
    VenueProvisioningStep,
)
from venue_admin.models.venue import Venue

logger = logging.getLogger(__name__)

StepAction = Callable[[Venue, Dict[str, Any]], Awaitable[None]]


@dataclass
class ProvisioningStep:
    """
    A named step; ``action`` receives the venue and a mutable copy of the
    step's stored context
    """
    name: ProvisioningStepName
    action: StepAction


def new_step_record(name: ProvisioningStepName, context: Dict[str, Any] = None) -> VenueProvisioningStep:
    return VenueProvisioningStep(
        step=name,
        status=ProvisioningStepStatus.PENDING,
        attempts=0,
        context=context or {},
    )


class ProvisioningRunner:
    """
    Runs provisioning steps sequentially and records their state
    """

    def __init__(self, db: AsyncSession, max_retries: int = None):
        self.db = db
        self.max_retries = settings.PROVISIONING_MAX_RETRIES if max_retries is None else max_retries

    def _record_for(self, venue: Venue, name: ProvisioningStepName) -> VenueProvisioningStep:
        for record in venue.provisioning_steps:
            if record.step == name:
                return record
        record = new_step_record(name)
        venue.provisioning_steps.append(record)
        return record

    async def run(
        self,
        venue: Venue,
        steps: List[ProvisioningStep],
        statuses: Iterable[ProvisioningStepStatus] = (
            ProvisioningStepStatus.PENDING,
            ProvisioningStepStatus.FAILED,
        )
    ) -> bool:
        """
        Execute every step whose recorded status is in ``statuses``.
        Returns True when all executed steps completed.
        """
        statuses = set(statuses)
        all_completed = True

        for step in steps:
            record = self._record_for(venue, step.name)
            if record.status not in statuses:
                continue

            success = await self._execute_step(venue, step, record)
            # Persist after each step
            await self.db.commit()
            all_completed = all_completed and success

        return all_completed

    async def _execute_step(self, venue: Venue, step: ProvisioningStep, record: VenueProvisioningStep) -> bool:
        """Execute a single step with retry logic"""
        log_extra = {"venue_id": str(venue.id), "step": step.name.value}

        for attempt in range(self.max_retries + 1):
            context = dict(record.context or {})
            record.attempts = (record.attempts or 0) + 1
            try:
                await step.action(venue, context)
            except Exception as e:
                # Side effects never abort venue creation, whatever the SDK raised
                expected = isinstance(e, VenueAdminException)
                error = e.message if expected else (str(e) or type(e).__name__)
                record.context = context
                record.last_error = error
                logger.warning(
                    f"Provisioning step {step.name.value} failed (attempt {attempt + 1}): {error}",
                    exc_info=not expected,
                    extra=log_extra
                )
                if attempt < self.max_retries:
                    # Wait before retry with exponential backoff
                    await asyncio.sleep(min(2 ** attempt, 10))
                    continue

                record.status = ProvisioningStepStatus.FAILED
                PROVISIONING_STEP_FAILURES.labels(step=step.name.value).inc()
                return False

            record.context = context
            record.status = ProvisioningStepStatus.COMPLETED
            record.last_error = None
            record.completed_at = utcnow()
            logger.info(f"Provisioning step {step.name.value} completed", extra=log_extra)
            return True

        return False
