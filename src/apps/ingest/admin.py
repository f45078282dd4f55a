from django.contrib import admin
from django.utils.html import format_html

from .models import ImportRun


@admin.register(ImportRun)
class ImportRunAdmin(admin.ModelAdmin):
    """Admin interface for graduate import runs."""

    list_display = [
        "id",
        "source_file",
        "created_at",
        "status_badge",
        "progress_display",
        "created_count",
        "skipped_count",
        "duration_display",
    ]
    list_filter = ["status", "created_at"]
    search_fields = ["source_file", "error_message"]
    readonly_fields = [
        "created_at",
        "started_at",
        "completed_at",
        "duration_display",
        "progress_display",
        "total_rows",
        "processed_rows",
        "created_count",
        "updated_count",
        "skipped_count",
        "valid_rows",
        "invalid_rows",
        "conflicts",
        "error_message",
    ]
    date_hierarchy = "created_at"

    fieldsets = (
        (
            "Identity",
            {"fields": ("source_file", "created_at")},
        ),
        (
            "Processing State",
            {
                "fields": (
                    "status",
                    "started_at",
                    "completed_at",
                    "duration_display",
                )
            },
        ),
        (
            "Statistics",
            {
                "fields": (
                    "total_rows",
                    "processed_rows",
                    "created_count",
                    "updated_count",
                    "skipped_count",
                    "progress_display",
                )
            },
        ),
        (
            "Row Outcomes",
            {
                "fields": ("valid_rows", "invalid_rows", "conflicts"),
                "classes": ("collapse",),
            },
        ),
        (
            "Errors",
            {
                "fields": ("error_message",),
                "classes": ("collapse",),
            },
        ),
    )

    def status_badge(self, obj):
        colors = {
            "PENDING": "#f59e0b",  # amber
            "COMPLETED": "#10b981",  # green
            "FAILED": "#ef4444",  # red
        }
        color = colors.get(obj.status, "#6b7280")
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-weight: bold; font-size: 11px;">{}</span>',
            color,
            obj.get_status_display(),
        )

    status_badge.short_description = "Status"

    def progress_display(self, obj):
        if obj.total_rows == 0:
            return "No data"

        percentage = obj.processed_rows / obj.total_rows * 100
        return format_html(
            '<div style="width: 100px; background: #e5e7eb; border-radius: 3px; overflow: hidden;">'
            '<div style="width: {}%; background: #10b981; height: 20px; line-height: 20px; '
            'text-align: center; color: white; font-size: 11px; font-weight: bold;">{}%</div></div>'
            '<div style="font-size: 11px; color: #6b7280; margin-top: 2px;">'
            "{} / {} rows</div>",
            round(percentage),
            round(percentage),
            obj.processed_rows,
            obj.total_rows,
        )

    progress_display.short_description = "Progress"

    def duration_display(self, obj):
        duration = obj.duration
        if duration:
            total_seconds = int(duration.total_seconds())
            minutes, seconds = divmod(total_seconds, 60)
            if minutes > 0:
                return f"{minutes}m {seconds}s"
            return f"{seconds}s"
        return "-"

    duration_display.short_description = "Duration"
