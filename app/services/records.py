"""Patient record service over the record store."""

import math
from dataclasses import dataclass

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import PatientRecord
from app.errors import PersistenceError, RecordNotFound, SlugExhausted
from app.models.patient import Pagination, PatientFields
from app.services.slugs import RandomSlugGenerator, SlugGenerator, is_valid_slug
from app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RecordPage:
    """One page of records plus its pagination summary."""

    records: list[PatientRecord]
    pagination: Pagination


class RecordService:
    """Create, read, update, delete and list patient records."""

    def __init__(
        self,
        session: AsyncSession,
        slug_generator: SlugGenerator | None = None,
        max_insert_attempts: int = 5,
    ):
        """Initialize record service.

        Args:
            session: Store session for this request
            slug_generator: Source of new slugs (defaults to random E-XXXXX)
            max_insert_attempts: Inserts to try when the slug loses a race
        """
        self.session = session
        self.slug_generator = slug_generator or RandomSlugGenerator()
        self.max_insert_attempts = max_insert_attempts

    async def slug_exists(self, slug: str) -> bool:
        """Check whether any record already uses a slug."""
        found = await self.session.scalar(select(PatientRecord.id).where(PatientRecord.slug == slug).limit(1))
        return found is not None

    async def create(self, fields: PatientFields) -> PatientRecord:
        """Insert a new record under a freshly generated slug.

        A unique-constraint violation on insert means another request took
        the same slug first; the slug is regenerated and the insert retried.

        Raises:
            SlugExhausted: If every insert attempt collided
            PersistenceError: On any other store failure
        """
        for attempt in range(1, self.max_insert_attempts + 1):
            try:
                slug = await self.slug_generator.generate(self.slug_exists)
            except SQLAlchemyError as e:
                logger.error(f"Slug lookup failed: {e}", exc_info=True)
                raise PersistenceError("Could not generate slug") from e

            record = PatientRecord(slug=slug, **fields.model_dump())
            self.session.add(record)
            try:
                await self.session.commit()
            except IntegrityError as e:
                await self.session.rollback()
                if not await self._slug_taken_after_rollback(slug):
                    logger.error(f"Insert rejected for a reason other than slug: {e}", exc_info=True)
                    raise PersistenceError("Could not create patient record") from e
                logger.warning(f"Slug {slug} was taken concurrently, retrying (attempt {attempt})")
                continue
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(f"Error creating patient: {e}", exc_info=True)
                raise PersistenceError("Could not create patient record") from e

            logger.info(f"Created patient record {record.id} with slug {slug}")
            return record

        raise SlugExhausted(f"Slug collided on {self.max_insert_attempts} insert attempts")

    async def get_by_slug(self, slug: str) -> PatientRecord:
        """Fetch one record by its public slug.

        Raises:
            RecordNotFound: If no record has this slug
        """
        # Malformed slugs cannot exist in the store
        if not is_valid_slug(slug):
            raise RecordNotFound(slug)

        try:
            record = await self.session.scalar(select(PatientRecord).where(PatientRecord.slug == slug))
        except SQLAlchemyError as e:
            logger.error(f"Error fetching patient {slug}: {e}", exc_info=True)
            raise PersistenceError("Could not fetch patient record") from e

        if record is None:
            raise RecordNotFound(slug)
        return record

    async def list(self, page: int, page_size: int) -> RecordPage:
        """Return one page of records, newest first.

        Pages past the last record are empty without querying rows, so
        offsets beyond the store's integer range never reach it.
        """
        offset = (page - 1) * page_size
        try:
            total = await self.session.scalar(select(func.count()).select_from(PatientRecord)) or 0
            records = []
            if offset < total:
                result = await self.session.scalars(
                    select(PatientRecord)
                    .order_by(PatientRecord.created_at.desc(), PatientRecord.id.desc())
                    .limit(page_size)
                    .offset(offset)
                )
                records = list(result.all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching patients: {e}", exc_info=True)
            raise PersistenceError("Could not list patient records") from e

        total_pages = math.ceil(total / page_size)
        pagination = Pagination(
            current_page=page,
            total_pages=total_pages,
            total_records=total,
            records_per_page=page_size,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )
        return RecordPage(records=records, pagination=pagination)

    async def update(self, slug: str, fields: PatientFields) -> None:
        """Replace every mutable field of the record with this slug.

        The id, slug and creation time are left untouched.

        Raises:
            RecordNotFound: If no record has this slug
        """
        try:
            result = await self.session.execute(
                update(PatientRecord).where(PatientRecord.slug == slug).values(**fields.model_dump())
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error updating patient {slug}: {e}", exc_info=True)
            raise PersistenceError("Could not update patient record") from e

        if result.rowcount == 0:
            raise RecordNotFound(slug)
        logger.info(f"Updated patient record {slug}")

    async def delete(self, record_id: int) -> bool:
        """Remove a record by internal id.

        Deleting an id that does not exist is not an error.

        Returns:
            True if a row was removed
        """
        try:
            result = await self.session.execute(delete(PatientRecord).where(PatientRecord.id == record_id))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error deleting patient {record_id}: {e}", exc_info=True)
            raise PersistenceError("Could not delete patient record") from e

        removed = result.rowcount > 0
        if removed:
            logger.info(f"Deleted patient record {record_id}")
        else:
            logger.info(f"Delete of patient record {record_id} matched no rows")
        return removed

    async def _slug_taken_after_rollback(self, slug: str) -> bool:
        try:
            return await self.slug_exists(slug)
        except SQLAlchemyError as e:
            raise PersistenceError("Could not check slug after failed insert") from e
