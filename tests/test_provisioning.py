"""
Provisioning runner tests
"""

import pytest
from unittest.mock import AsyncMock

from sqlalchemy import select

from venue_admin.core import provisioning
from venue_admin.core.exceptions import UpstreamServiceError
from venue_admin.core.provisioning import ProvisioningRunner, ProvisioningStep, new_step_record
from venue_admin.models.provisioning import ProvisioningStepName, ProvisioningStepStatus
from venue_admin.models.venue import Venue

pytestmark = pytest.mark.unit


@pytest.fixture
def no_backoff(monkeypatch):
    sleep = AsyncMock()
    monkeypatch.setattr(provisioning.asyncio, "sleep", sleep)
    return sleep


async def load_venue(session, venue_id):
    result = await session.execute(select(Venue).where(Venue.id == venue_id))
    return result.scalar_one()


def record_of(venue, name):
    return next(record for record in venue.provisioning_steps if record.step == name)


class TestProvisioningRunner:

    async def test_completes_steps_in_order(self, database, venue_owner, make_venue):
        venue = await make_venue(venue_owner)
        order = []

        async def images(venue, context):
            order.append("images")
            context["moved"] = 2

        async def payment(venue, context):
            order.append("payment")

        async with database.session() as session:
            venue = await load_venue(session, venue.id)
            ok = await ProvisioningRunner(session, max_retries=0).run(venue, [
                ProvisioningStep(ProvisioningStepName.IMAGES, images),
                ProvisioningStep(ProvisioningStepName.PAYMENT_ACCOUNT, payment),
            ])

        assert ok
        assert order == ["images", "payment"]

        async with database.session() as session:
            venue = await load_venue(session, venue.id)
            images_record = record_of(venue, ProvisioningStepName.IMAGES)
            assert images_record.status == ProvisioningStepStatus.COMPLETED
            assert images_record.attempts == 1
            assert images_record.context == {"moved": 2}
            assert images_record.completed_at is not None

    async def test_failure_recorded_and_later_steps_run(self, database, venue_owner, make_venue):
        venue = await make_venue(venue_owner)
        payment = AsyncMock()

        async def images(venue, context):
            raise UpstreamServiceError("storage", "bucket unavailable")

        async with database.session() as session:
            venue = await load_venue(session, venue.id)
            ok = await ProvisioningRunner(session, max_retries=0).run(venue, [
                ProvisioningStep(ProvisioningStepName.IMAGES, images),
                ProvisioningStep(ProvisioningStepName.PAYMENT_ACCOUNT, payment),
            ])

            assert not ok
            payment.assert_awaited_once()
            failed = record_of(venue, ProvisioningStepName.IMAGES)
            assert failed.status == ProvisioningStepStatus.FAILED
            assert failed.last_error == "bucket unavailable"
            assert failed.completed_at is None

    async def test_retries_with_backoff(self, database, venue_owner, make_venue, no_backoff):
        venue = await make_venue(venue_owner)
        attempts = []

        async def flaky(venue, context):
            attempts.append(1)
            if len(attempts) < 3:
                raise UpstreamServiceError("stripe", "rate limited")

        async with database.session() as session:
            venue = await load_venue(session, venue.id)
            ok = await ProvisioningRunner(session, max_retries=2).run(venue, [
                ProvisioningStep(ProvisioningStepName.PAYMENT_ACCOUNT, flaky),
            ])

            record = record_of(venue, ProvisioningStepName.PAYMENT_ACCOUNT)
            assert ok
            assert record.attempts == 3
            assert record.last_error is None
            assert [call.args[0] for call in no_backoff.await_args_list] == [1, 2]

    async def test_only_selected_statuses_run(self, database, venue_owner, make_venue):
        venue = await make_venue(venue_owner)
        images = AsyncMock()
        payment = AsyncMock()

        async with database.session() as session:
            venue = await load_venue(session, venue.id)
            completed = new_step_record(ProvisioningStepName.IMAGES)
            completed.status = ProvisioningStepStatus.COMPLETED
            failed = new_step_record(ProvisioningStepName.PAYMENT_ACCOUNT)
            failed.status = ProvisioningStepStatus.FAILED
            venue.provisioning_steps = [completed, failed]
            await session.commit()

            await ProvisioningRunner(session, max_retries=0).run(
                venue,
                [
                    ProvisioningStep(ProvisioningStepName.IMAGES, images),
                    ProvisioningStep(ProvisioningStepName.PAYMENT_ACCOUNT, payment),
                ],
                statuses=[ProvisioningStepStatus.FAILED]
            )

        images.assert_not_awaited()
        payment.assert_awaited_once()

    async def test_sdk_errors_recorded_as_failed_step(self, database, venue_owner, make_venue):
        venue = await make_venue(venue_owner)
        payment = AsyncMock()

        async def broken(venue, context):
            raise ConnectionError("connection reset by peer")

        async with database.session() as session:
            venue = await load_venue(session, venue.id)
            ok = await ProvisioningRunner(session, max_retries=0).run(venue, [
                ProvisioningStep(ProvisioningStepName.IMAGES, broken),
                ProvisioningStep(ProvisioningStepName.PAYMENT_ACCOUNT, payment),
            ])

            assert not ok
            payment.assert_awaited_once()
            failed = record_of(venue, ProvisioningStepName.IMAGES)
            assert failed.status == ProvisioningStepStatus.FAILED
            assert failed.last_error == "connection reset by peer"

    async def test_error_without_message_uses_type_name(self, database, venue_owner, make_venue):
        venue = await make_venue(venue_owner)

        async def broken(venue, context):
            raise KeyError()

        async with database.session() as session:
            venue = await load_venue(session, venue.id)
            await ProvisioningRunner(session, max_retries=0).run(venue, [
                ProvisioningStep(ProvisioningStepName.IMAGES, broken),
            ])
            assert record_of(venue, ProvisioningStepName.IMAGES).last_error == "KeyError"
