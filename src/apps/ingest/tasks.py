"""
Background tasks for graduate imports.

Tasks can be triggered by management commands or the admin; with the default
ImmediateBackend they run in-process when enqueued.
"""

from typing import Any

from django.tasks import task
from loguru import logger

from .models import ImportRun
from .services import GraduateImportProcessor, ImportPolicy


@task
def run_graduate_import(run_id: int, detect_similar: bool | None = None) -> dict[str, Any]:
    """
    Process a stored ImportRun from its source file.

    Args:
        run_id: ID of the ImportRun to process
        detect_similar: Override the similar-name detection setting

    Returns:
        Dictionary with the run's counters
    """
    run = ImportRun.objects.get(id=run_id)
    logger.info(f"Processing import #{run_id} ({run.source_file.name})")

    overrides = {}
    if detect_similar is not None:
        overrides["detect_similar_names"] = detect_similar
    policy = ImportPolicy.from_settings(**overrides)

    try:
        report = GraduateImportProcessor(run, policy).process()
    except Exception as e:
        logger.error(f"Import #{run_id} failed: {e}")
        raise

    return {
        "success": True,
        "run_id": run_id,
        "processed": report.processed_rows,
        "created": report.created_count,
        "updated": report.updated_count,
        "skipped": report.skipped_count,
        "invalid": len(report.invalid_rows),
        "conflicts": len(report.conflicts),
    }
