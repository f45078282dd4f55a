"""
Duplicate detection against existing graduates.

Natural keys are checked in order: email (case-insensitive), then the
student id when one was supplied. Optionally, graduates with a similar name
in the same graduation year are scored and the first one above the policy
threshold is reported as a ``similar_record``. Lookups only, no writes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import Levenshtein
from loguru import logger

from apps.core.models import Graduate

from .transformer import ImportPolicy

DUPLICATE_EMAIL = "duplicate_email"
DUPLICATE_STUDENT_ID = "duplicate_student_id"
SIMILAR_RECORD = "similar_record"

# (weight, comparison) per attribute in calculate_similarity
NAME_WEIGHT = 3
YEAR_WEIGHT = 2
COURSE_WEIGHT = 1
PHONE_WEIGHT = 1


@dataclass
class DuplicateMatch:
    graduate: Graduate
    conflict_type: str
    similarity_score: float

    def existing_summary(self) -> dict[str, Any]:
        """Reference to the colliding record, as stored in conflict outcomes."""
        graduate = self.graduate
        return {
            "id": graduate.pk,
            "name": graduate.name,
            "email": graduate.email,
            "student_id": graduate.student_id,
            "graduation_year": graduate.graduation_year,
        }


def string_similarity(first: str, second: str) -> float:
    """1 - normalized Levenshtein distance, case and whitespace insensitive."""
    first = first.strip().lower()
    second = second.strip().lower()
    if first == second:
        return 1.0
    max_len = max(len(first), len(second))
    if max_len == 0:
        return 1.0
    return 1 - Levenshtein.distance(first, second) / max_len


def calculate_similarity(payload: dict[str, Any], graduate: Graduate) -> float:
    """
    Weighted similarity between an incoming payload and an existing graduate.

    Name counts three times, graduation year twice, course once, and phone
    once when both sides have one. Returns a value in [0, 1].
    """
    score = 0.0
    total = 0

    if payload.get("name") and graduate.name:
        score += string_similarity(payload["name"], graduate.name) * NAME_WEIGHT
        total += NAME_WEIGHT

    if payload.get("graduation_year") is not None and graduate.graduation_year:
        if int(payload["graduation_year"]) == graduate.graduation_year:
            score += YEAR_WEIGHT
        total += YEAR_WEIGHT

    if payload.get("course_id") is not None and graduate.course_id is not None:
        if payload["course_id"] == graduate.course_id:
            score += COURSE_WEIGHT
        total += COURSE_WEIGHT

    if payload.get("phone") and graduate.phone:
        score += string_similarity(payload["phone"], graduate.phone) * PHONE_WEIGHT
        total += PHONE_WEIGHT

    return round(score / total, 4) if total else 0.0


def _find_similar_name(
    payload: dict[str, Any], policy: ImportPolicy
) -> DuplicateMatch | None:
    candidates = Graduate.objects.filter(
        name__icontains=payload["name"],
        graduation_year=payload["graduation_year"],
    ).order_by("id")

    for candidate in candidates:
        similarity = calculate_similarity(payload, candidate)
        if similarity > policy.similarity_threshold:
            logger.debug(
                f"'{payload['name']}' resembles graduate #{candidate.pk} "
                f"(similarity {similarity:.2f})"
            )
            return DuplicateMatch(candidate, SIMILAR_RECORD, similarity)
    return None


def find_duplicate(
    payload: dict[str, Any], policy: ImportPolicy | None = None
) -> DuplicateMatch | None:
    """
    Look for an existing graduate colliding with ``payload``.

    Args:
        payload: Transformed row (see transformer.transform_row)
        policy: Controls similar-name detection; read from settings when omitted

    Returns:
        DuplicateMatch for the first collision found, or None
    """
    policy = policy or ImportPolicy.from_settings()

    existing = Graduate.objects.filter(email__iexact=payload["email"]).first()
    if existing is not None:
        return DuplicateMatch(
            existing, DUPLICATE_EMAIL, calculate_similarity(payload, existing)
        )

    student_id = payload.get("student_id")
    if student_id:
        existing = Graduate.objects.filter(student_id=student_id).first()
        if existing is not None:
            return DuplicateMatch(
                existing,
                DUPLICATE_STUDENT_ID,
                calculate_similarity(payload, existing),
            )

    if policy.detect_similar_names:
        return _find_similar_name(payload, policy)

    return None
