import logging
from typing import List, Optional, Any

from sqlalchemy import select

from database.models import PlacementRequest
from database.repositories.base import BaseRepository, as_uuid

logger = logging.getLogger(__name__)


class PlacementRequestRepository(BaseRepository):
    def get_by_id(self, request_id: Any, for_update: bool = False) -> Optional[PlacementRequest]:
        stmt = select(PlacementRequest).where(PlacementRequest.id == as_uuid(request_id))
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_pending_for_student(self, student_id: Any, trainer_id: Optional[Any] = None) -> Optional[PlacementRequest]:
        stmt = select(PlacementRequest).where(
            PlacementRequest.student_id == as_uuid(student_id),
            PlacementRequest.status == 'pending'
        )
        if trainer_id is not None:
            stmt = stmt.where(PlacementRequest.trainer_id == as_uuid(trainer_id))
        return self.db.execute(stmt).scalars().first()

    def list_by_status(self, status: Optional[str] = 'pending') -> List[PlacementRequest]:
        stmt = select(PlacementRequest)
        if status and status != 'all':
            stmt = stmt.where(PlacementRequest.status == status)
        stmt = stmt.order_by(PlacementRequest.requested_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def add(self, request: PlacementRequest) -> PlacementRequest:
        self.db.add(request)
        return request

    def delete(self, request: PlacementRequest) -> None:
        self.db.delete(request)
