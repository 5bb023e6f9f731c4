"""
Venue lifecycle: creation with provisioning, moderation, soft delete
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from venue_admin.config import settings
from venue_admin.core.exceptions import NotFoundError, PersistenceError, UpstreamServiceError, ValidationError
from venue_admin.core.metrics import VENUES_CREATED
from venue_admin.core.provisioning import ProvisioningRunner, ProvisioningStep, new_step_record
from venue_admin.models.base import utcnow
from venue_admin.models.provisioning import ProvisioningStepName, ProvisioningStepStatus
from venue_admin.models.user import User
from venue_admin.models.venue import Venue, VenueStatus, empty_rating_distribution
from venue_admin.schemas.venue import VenueCreate, VenueUpdate, VenueListStatus
from venue_admin.services.payment_service import OnboardingLink, PaymentAccountProvisioner
from venue_admin.services.storage_service import MediaStorage, TEMP_NAMESPACE, is_temporary_key

logger = logging.getLogger(__name__)

DEFAULT_SORT = "createdAt_desc"

SORT_FIELDS = {
    "createdAt": Venue.created_at,
    "updatedAt": Venue.updated_at,
    "name": Venue.name,
    "country": Venue.country,
    "status": Venue.status,
    "commissionPercentage": Venue.commission_percentage,
}


def parse_sort(sort: Optional[str]):
    """
    ``field_direction`` to an ORDER BY clause; unknown values fall back to
    createdAt_desc
    """
    field, _, direction = (sort or "").rpartition("_")
    if field not in SORT_FIELDS or direction not in ("asc", "desc"):
        field, _, direction = DEFAULT_SORT.rpartition("_")

    column = SORT_FIELDS[field]
    return column.desc() if direction == "desc" else column.asc()


def _contains(column, text: str):
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def assign_fields(target, values: Dict[str, Any]) -> None:
    """
    Set attributes, collecting model validation failures into a single
    ValidationError
    """
    errors = []
    for key, value in values.items():
        try:
            setattr(target, key, value)
        except ValueError as e:
            errors.append(str(e))
    if errors:
        raise ValidationError("Validation error", details=errors)


class VenueService:
    """Service for venue administration"""

    def __init__(
        self,
        db: AsyncSession,
        storage: Optional[MediaStorage] = None,
        payments: Optional[PaymentAccountProvisioner] = None
    ):
        self.db = db
        self.storage = storage
        self.payments = payments

    async def _load(self, venue_id: UUID) -> Venue:
        result = await self.db.execute(
            select(Venue)
            .where(Venue.id == venue_id)
            .execution_options(populate_existing=True)
        )
        venue = result.scalar_one_or_none()
        if not venue:
            raise NotFoundError("Venue", venue_id)
        return venue

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Venue rejected by database constraints: {e.orig}")
            raise ValidationError("Validation error", details=[str(e.orig)])
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to save venue: {e}", exc_info=True)
            raise PersistenceError()

    def _provisioning_steps(self) -> List[ProvisioningStep]:
        return [
            ProvisioningStep(ProvisioningStepName.IMAGES, self._relocate_images),
            ProvisioningStep(ProvisioningStepName.PAYMENT_ACCOUNT, self._provision_payment_account),
        ]

    async def get(self, venue_id: UUID) -> Venue:
        return await self._load(venue_id)

    async def create(self, data: VenueCreate) -> Venue:
        """
        Create a pending venue, then relocate its images and provision a
        payment account. Failures of the last two are recorded on the
        venue's provisioning steps and do not fail the creation.
        """
        owner = await self.db.get(User, data.owner_id)
        if not owner:
            raise NotFoundError("Venue owner", data.owner_id)
        if not owner.email:
            raise ValidationError("Venue owner email not found")

        image_refs = [
            {"url": image} if isinstance(image, str) else {"url": image.url, "storage_key": image.storage_key}
            for image in data.images
        ]

        venue = Venue()
        assign_fields(venue, {
            "owner": owner,
            "name": data.name,
            "description": data.description or "",
            "address": data.address,
            "country": data.country,
            "currency": data.currency,
            "longitude": data.longitude,
            "latitude": data.latitude,
            "commission_percentage": data.commission_percentage,
            "amenities": data.amenities,
            "sports_types": data.sports_types,
            "images": [],
            "status": VenueStatus.PENDING,
            "rating_average": 0.0,
            "rating_count": 0,
            "rating_distribution": empty_rating_distribution(),
            "stripe_account_id": None,
            "stripe_onboarding_complete": False,
        })
        venue.provisioning_steps = [
            new_step_record(
                ProvisioningStepName.IMAGES,
                {"images": image_refs, "pending": list(range(len(image_refs)))}
            ),
            new_step_record(ProvisioningStepName.PAYMENT_ACCOUNT),
        ]

        self.db.add(venue)
        await self._commit()
        VENUES_CREATED.inc()
        logger.info(f"Venue created: {venue.id}", extra={"venue_id": str(venue.id)})

        runner = ProvisioningRunner(self.db)
        if not await runner.run(venue, self._provisioning_steps()):
            logger.warning(
                f"Venue {venue.id} was only partially provisioned",
                extra={"venue_id": str(venue.id)}
            )

        return await self._load(venue.id)

    async def _relocate_images(self, venue: Venue, context: Dict[str, Any]) -> None:
        """
        Move temporary uploads into the venue's namespace. An image that
        cannot be moved keeps its original URL and stays pending.
        """
        refs = context.get("images", [])
        if context.get("seeded"):
            # Later runs respect edits made through PATCH, including removals
            images = list(venue.images or [])
        else:
            images = [ref["url"] for ref in refs]
            context["seeded"] = True
        failed = []

        for index in context.get("pending", []):
            ref = refs[index]
            if index >= len(images) or images[index] != ref["url"]:
                # Replaced through an update since the last attempt
                continue

            storage_key = ref.get("storage_key")
            if not is_temporary_key(storage_key):
                continue

            try:
                moved = await self.storage.relocate(storage_key, TEMP_NAMESPACE, str(venue.id))
            except UpstreamServiceError as e:
                logger.error(f"Error moving image {storage_key}: {e.message}", extra={"venue_id": str(venue.id)})
                failed.append(index)
                continue
            except Exception as e:
                logger.error(
                    f"Unexpected error moving image {storage_key}: {e}",
                    exc_info=True,
                    extra={"venue_id": str(venue.id)}
                )
                failed.append(index)
                continue
            images[index] = moved.url

        venue.images = images
        context["pending"] = failed
        if failed:
            raise UpstreamServiceError("storage", f"{len(failed)} image(s) could not be relocated")

    async def _provision_payment_account(self, venue: Venue, context: Dict[str, Any]) -> None:
        if venue.stripe_account_id:
            return
        if not venue.owner or not venue.owner.email:
            raise ValidationError("Venue owner email not found")

        account_id = await self.payments.provision(
            venue_id=str(venue.id),
            owner_id=str(venue.owner_id),
            venue_name=venue.name,
            owner_email=venue.owner.email,
        )
        venue.stripe_account_id = account_id
        context["account_id"] = account_id

    async def retry_provisioning(self, venue_id: UUID) -> Venue:
        """
        Re-run only the failed provisioning steps of a venue
        """
        venue = await self._load(venue_id)
        runner = ProvisioningRunner(self.db)
        await runner.run(venue, self._provisioning_steps(), statuses=[ProvisioningStepStatus.FAILED])
        return await self._load(venue_id)

    async def list(
        self,
        status: VenueListStatus = VenueListStatus.ALL,
        q: Optional[str] = None,
        country: Optional[str] = None,
        sort: Optional[str] = None,
        page: int = 1
    ) -> Tuple[List[Venue], int, int, int]:
        """
        Returns (venues, total_count, total_pages, current_page)
        """
        filters = []
        status = VenueListStatus(status)
        if status == VenueListStatus.DELETED:
            filters.append(Venue.deleted_at.isnot(None))
        elif status == VenueListStatus.ALL:
            filters.append(Venue.deleted_at.is_(None))
        else:
            filters.append(Venue.status == VenueStatus(status.value))
            filters.append(Venue.deleted_at.is_(None))

        if q:
            filters.append(or_(_contains(Venue.name, q), _contains(Venue.address, q)))
        if country:
            filters.append(Venue.country == country.upper())

        page_size = settings.VENUE_PAGE_SIZE
        total_count = await self.db.scalar(
            select(func.count()).select_from(Venue).where(*filters)
        )

        result = await self.db.execute(
            select(Venue)
            .where(*filters)
            .order_by(parse_sort(sort), Venue.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        venues = list(result.scalars().all())
        total_pages = math.ceil(total_count / page_size)
        return venues, total_count, total_pages, page

    async def update(self, venue_id: UUID, patch: VenueUpdate) -> Venue:
        """
        Apply a partial update. Any status may move to any other status;
        the deletion timestamp is never touched.
        """
        venue = await self._load(venue_id)
        values = patch.model_dump(exclude_unset=True, exclude_none=True)
        if "status" in values:
            values["status"] = VenueStatus(values["status"])

        assign_fields(venue, values)
        await self._commit()
        logger.info(f"Venue {venue_id} updated: {sorted(values)}", extra={"venue_id": str(venue_id)})
        return await self._load(venue_id)

    async def soft_delete(self, venue_id: UUID) -> Venue:
        venue = await self._load(venue_id)
        venue.deleted_at = utcnow()
        await self._commit()
        logger.info(f"Venue {venue_id} deleted", extra={"venue_id": str(venue_id)})
        return await self._load(venue_id)

    async def restore(self, venue_id: UUID) -> Venue:
        venue = await self._load(venue_id)
        venue.deleted_at = None
        await self._commit()
        logger.info(f"Venue {venue_id} restored", extra={"venue_id": str(venue_id)})
        return await self._load(venue_id)

    async def search(self, q: str = "") -> List[Dict[str, Any]]:
        """
        Case-insensitive name lookup, capped at VENUE_SEARCH_LIMIT results
        """
        stmt = select(Venue.id, Venue.name)
        if q:
            stmt = stmt.where(_contains(Venue.name, q))
        result = await self.db.execute(stmt.order_by(Venue.name).limit(settings.VENUE_SEARCH_LIMIT))
        return [{"id": row.id, "name": row.name} for row in result.all()]

    async def stats(self) -> Dict[str, Any]:
        """
        Counts for the portal toolbar; status and country counts exclude
        deleted venues
        """
        live = Venue.deleted_at.is_(None)

        result = await self.db.execute(
            select(Venue.status, func.count()).where(live).group_by(Venue.status)
        )
        by_status = {status: count for status, count in result.all()}

        deleted = await self.db.scalar(
            select(func.count()).select_from(Venue).where(Venue.deleted_at.isnot(None))
        )

        count = func.count().label("count")
        result = await self.db.execute(
            select(Venue.country, count)
            .where(live)
            .group_by(Venue.country)
            .order_by(count.desc(), Venue.country)
        )
        by_country = [{"country": country, "count": n} for country, n in result.all()]

        return {
            "total": sum(by_status.values()),
            "pending": by_status.get(VenueStatus.PENDING, 0),
            "approved": by_status.get(VenueStatus.APPROVED, 0),
            "rejected": by_status.get(VenueStatus.REJECTED, 0),
            "deleted": deleted,
            "by_country": by_country,
        }

    async def create_onboarding_link(self, venue_id: UUID) -> OnboardingLink:
        venue = await self._load(venue_id)
        if not venue.stripe_account_id:
            raise ValidationError("Venue has no payment account", details=[
                "Retry provisioning to create the payment account first"
            ])
        return await self.payments.create_onboarding_link(venue.stripe_account_id, str(venue.id))

    async def refresh_onboarding_status(self, venue_id: UUID) -> Venue:
        venue = await self._load(venue_id)
        if not venue.stripe_account_id:
            raise ValidationError("Venue has no payment account")

        account = await self.payments.retrieve_account(venue.stripe_account_id)
        venue.stripe_onboarding_complete = account.onboarding_complete
        await self._commit()
        return await self._load(venue_id)
