"""Persistence of new graduates from import payloads."""

from __future__ import annotations

from typing import Any

from django.db import transaction

from apps.core.models import Graduate


def create_graduate(payload: dict[str, Any]) -> Graduate:
    """
    Create a graduate and compute its profile completion.

    Runs in its own savepoint: if the insert is rejected (for example a
    unique constraint lost to a concurrent import) only this row is rolled
    back and the exception propagates to the caller.
    """
    with transaction.atomic(savepoint=True):
        graduate = Graduate.objects.create(**payload)
        graduate.update_profile_completion()
    return graduate
