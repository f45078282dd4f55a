from django.contrib import admin

from .models import Course, Graduate


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ["name", "code", "created_at"]
    search_fields = ["name", "code"]
    ordering = ["name"]


@admin.register(Graduate)
class GraduateAdmin(admin.ModelAdmin):
    """Admin interface for graduates."""

    list_display = [
        "name",
        "email",
        "student_id",
        "course",
        "graduation_year",
        "employment_display",
        "profile_completion_percentage",
        "created_at",
    ]
    list_filter = [
        "graduation_year",
        "course",
        "academic_standing",
        "job_search_active",
        "allow_employer_contact",
    ]
    search_fields = ["name", "email", "student_id"]
    list_select_related = ["course"]
    readonly_fields = ["profile_completion_percentage", "created_at", "updated_at"]

    def employment_display(self, obj):
        status = obj.employment.get("status") or ""
        return status.replace("_", " ").title() or "-"

    employment_display.short_description = "Employment"
