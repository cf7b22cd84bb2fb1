from database.repositories.base import BaseRepository
from database.repositories.student import StudentRepository
from database.repositories.job import JobRepository
from database.repositories.evaluation import EvaluationRepository
from database.repositories.placement_request import PlacementRequestRepository

__all__ = [
    'BaseRepository',
    'StudentRepository',
    'JobRepository',
    'EvaluationRepository',
    'PlacementRequestRepository',
]
