# eduopps/services/registration_service.py
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eduopps.core.clock import Clock
from eduopps.core.errors import (
    CapacityExceeded,
    NotFoundError,
    PermissionDenied,
    TransientFailure,
)
from eduopps.models import Opportunity, StudentInterest, User
from eduopps.schemas.user import AttendeeResponse, UserContext
from .authorization import ensure_can_view_attendees
from .base_service import BaseService
from .visibility import is_visible

logger = logging.getLogger(__name__)

REGISTERED = "registered"


def compute_spaces_left(number_of_spaces: Optional[int], registered_count: int) -> Optional[int]:
    """None means the opportunity has no capacity limit"""
    if number_of_spaces is None:
        return None
    return max(number_of_spaces - registered_count, 0)


class RegistrationService(BaseService):
    """
    Student registrations against capacity-limited opportunities.

    The capacity check and the insert run in one transaction that holds the
    opportunity row lock (SELECT ... FOR UPDATE on PostgreSQL, BEGIN IMMEDIATE
    on SQLite), so the number of registrations never exceeds number_of_spaces.
    """

    def __init__(self, db: AsyncSession, clock: Optional[Clock] = None):
        super().__init__(db)
        self.clock = clock or Clock()

    async def register(self, student: UserContext, opportunity_id: int) -> StudentInterest:
        """
        Register the student for an opportunity.

        Returns the existing registration when there already is one.

        Raises:
            NotFoundError: the opportunity does not exist
            PermissionDenied: the opportunity is not visible to the student
            CapacityExceeded: every space is taken
            TransientFailure: the transaction could not complete
        """
        try:
            interest = await self._register(student, opportunity_id)
        except (NotFoundError, PermissionDenied, CapacityExceeded):
            await self.db.rollback()
            raise
        except IntegrityError:
            # Lost a race against a duplicate insert for the same pair
            await self.db.rollback()
            return await self._resolve_duplicate(student.id, opportunity_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Registration of user {student.id} for opportunity {opportunity_id} failed",
                exc_info=True
            )
            raise TransientFailure(details={"opportunity_id": opportunity_id}) from e

        return interest

    async def _register(self, student: UserContext, opportunity_id: int) -> StudentInterest:
        opportunity = await self._lock_opportunity(opportunity_id)
        if opportunity is None:
            raise NotFoundError(f"Opportunity {opportunity_id} not found")

        if not is_visible(student, opportunity):
            logger.info(f"User {student.id} tried to register for hidden opportunity {opportunity_id}")
            raise PermissionDenied("This opportunity is not available to your school")

        existing = await self.get_interest(student.id, opportunity_id)
        if existing is not None:
            await self.db.commit()
            return existing

        if opportunity.number_of_spaces is not None:
            count = await self.registered_count(opportunity_id)
            if count >= opportunity.number_of_spaces:
                raise CapacityExceeded(
                    spaces_left=compute_spaces_left(opportunity.number_of_spaces, count)
                )

        interest = StudentInterest(
            student_id=student.id,
            opportunity_id=opportunity_id,
            registration_date=self.clock.now(),
            status=REGISTERED,
            notes=None
        )
        self.db.add(interest)
        await self.db.commit()

        logger.info(
            f"User {student.id} registered for opportunity {opportunity_id}",
            extra={"user_id": student.id, "opportunity_id": opportunity_id}
        )
        return interest

    async def _lock_opportunity(self, opportunity_id: int) -> Optional[Opportunity]:
        query = (
            select(Opportunity)
            .where(Opportunity.id == opportunity_id)
            .with_for_update()
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _resolve_duplicate(self, student_id: int, opportunity_id: int) -> StudentInterest:
        try:
            existing = await self.get_interest(student_id, opportunity_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise TransientFailure(details={"opportunity_id": opportunity_id}) from e

        if existing is None:
            # The conflict was not a duplicate registration (e.g. the opportunity was deleted)
            raise TransientFailure(details={"opportunity_id": opportunity_id})
        return existing

    async def unregister(self, student_id: int, opportunity_id: int) -> None:
        """Remove a registration. Removing one that does not exist is a no-op."""
        try:
            result = await self.db.execute(
                delete(StudentInterest).where(
                    StudentInterest.student_id == student_id,
                    StudentInterest.opportunity_id == opportunity_id
                )
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Unregistering user {student_id} from opportunity {opportunity_id} failed",
                exc_info=True
            )
            raise TransientFailure(details={"opportunity_id": opportunity_id}) from e

        if result.rowcount:
            logger.info(
                f"User {student_id} unregistered from opportunity {opportunity_id}",
                extra={"user_id": student_id, "opportunity_id": opportunity_id}
            )

    async def get_interest(self, student_id: int, opportunity_id: int) -> Optional[StudentInterest]:
        result = await self.db.execute(
            select(StudentInterest).where(
                StudentInterest.student_id == student_id,
                StudentInterest.opportunity_id == opportunity_id
            )
        )
        return result.scalar_one_or_none()

    async def registered_count(self, opportunity_id: int) -> int:
        result = await self.db.execute(
            select(func.count(StudentInterest.id)).where(
                StudentInterest.opportunity_id == opportunity_id
            )
        )
        return result.scalar_one()

    async def spaces_left(self, opportunity: Opportunity) -> Optional[int]:
        if opportunity.number_of_spaces is None:
            return None
        return compute_spaces_left(
            opportunity.number_of_spaces,
            await self.registered_count(opportunity.id)
        )

    async def interest_counts(self, opportunity_ids: Optional[Iterable[int]] = None) -> Dict[int, int]:
        """Registration count per opportunity; opportunities without registrations are absent"""
        query = (
            select(StudentInterest.opportunity_id, func.count(StudentInterest.id))
            .group_by(StudentInterest.opportunity_id)
        )
        if opportunity_ids is not None:
            query = query.where(StudentInterest.opportunity_id.in_(list(opportunity_ids)))

        result = await self.db.execute(query)
        return {opportunity_id: count for opportunity_id, count in result.all()}

    async def interests_for_student(self, student_id: int) -> List[StudentInterest]:
        result = await self.db.execute(
            select(StudentInterest)
            .where(StudentInterest.student_id == student_id)
            .order_by(StudentInterest.registration_date.desc(), StudentInterest.id.desc())
        )
        return list(result.scalars().all())

    async def attendees(self, user: UserContext, opportunity_id: int) -> List[AttendeeResponse]:
        """Students registered for an opportunity, in registration order"""
        opportunity = await self.db.get(Opportunity, opportunity_id)
        if opportunity is None:
            raise NotFoundError(f"Opportunity {opportunity_id} not found")

        ensure_can_view_attendees(user, opportunity)

        result = await self.db.execute(
            select(User, StudentInterest)
            .join(StudentInterest, StudentInterest.student_id == User.id)
            .where(StudentInterest.opportunity_id == opportunity_id)
            .order_by(StudentInterest.registration_date, StudentInterest.id)
        )
        return [
            AttendeeResponse(
                id=student.id,
                email=student.email,
                username=student.username,
                first_name=student.first_name,
                last_name=student.last_name,
                school_id=student.school_id,
                registration_date=interest.registration_date,
                status=interest.status
            )
            for student, interest in result.unique().all()
        ]
