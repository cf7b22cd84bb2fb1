from .base import Base
from .student import StudentProfile, StudentSkill, StudentTest, TrainerRemark
from .job import JobPosting, JobRequiredSkill, JobApplicant, JobApplication
from .evaluation import StudentEvaluation
from .placement import PlacementRequest

__all__ = [
    'Base',
    'StudentProfile',
    'StudentSkill',
    'StudentTest',
    'TrainerRemark',
    'JobPosting',
    'JobRequiredSkill',
    'JobApplicant',
    'JobApplication',
    'StudentEvaluation',
    'PlacementRequest',
]
