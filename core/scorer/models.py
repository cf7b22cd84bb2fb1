#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring results.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass

from database.models import StudentProfile


@dataclass
class MatchResult:
    """Match score for one (student, job) pair, optionally explained."""
    total_score: int
    explanation: Optional[Dict[str, Any]] = None


@dataclass
class RankedCandidate:
    """One entry of a job's ranked candidate list."""
    student: StudentProfile
    match_score: int
    explanation: Optional[Dict[str, Any]] = None
