from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils.translation import gettext_lazy as _


class ImportRun(models.Model):
    """
    Tracks a single graduate import operation.

    One run = one uploaded spreadsheet. Created as PENDING when the import
    starts and written once at the end with aggregated totals and the
    per-row outcomes (valid_rows / invalid_rows / conflicts), each keyed by
    the spreadsheet row number (index + 2).
    """

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending Processing")
        COMPLETED = "COMPLETED", _("Completed")
        FAILED = "FAILED", _("Failed with Errors")

    source_file = models.FileField(
        upload_to="graduate_imports/%Y/%m/%d/",
        blank=True,
        help_text="Original uploaded spreadsheet",
    )
    created_at = models.DateTimeField(
        auto_now_add=True, help_text="When the import was started"
    )

    # Processing State
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True
    )
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    # Statistics
    total_rows = models.IntegerField(default=0, help_text="Rows read from the file")
    processed_rows = models.IntegerField(default=0)
    created_count = models.IntegerField(default=0, help_text="New graduates created")
    updated_count = models.IntegerField(
        default=0, help_text="Existing graduates updated (imports never update)"
    )
    skipped_count = models.IntegerField(
        default=0, help_text="Invalid rows plus duplicate conflicts"
    )

    # Row outcomes
    valid_rows = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    invalid_rows = models.JSONField(
        default=list, blank=True, encoder=DjangoJSONEncoder
    )
    conflicts = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)

    # Error Tracking
    error_message = models.TextField(
        null=True, blank=True, help_text="Top-level error if the run failed"
    )

    class Meta:
        db_table = "ingest_import_runs"
        verbose_name = "Import Run"
        verbose_name_plural = "Import Runs"
        ordering = ["-created_at"]

    def __str__(self):
        name = self.source_file.name if self.source_file else "rows"
        return f"Import #{self.pk} - {name} ({self.status})"

    @property
    def duration(self):
        """Calculate processing duration if completed."""
        if self.started_at and self.completed_at:
            return self.completed_at - self.started_at
        return None
