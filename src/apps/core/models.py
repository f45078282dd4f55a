from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

# -----------------------------------------------------------------------------
# Choices (Enums)
# -----------------------------------------------------------------------------


class EmploymentStatus(models.TextChoices):
    UNEMPLOYED = "unemployed", _("Unemployed")
    EMPLOYED = "employed", _("Employed")
    SELF_EMPLOYED = "self_employed", _("Self Employed")
    FURTHER_STUDIES = "further_studies", _("Further Studies")
    OTHER = "other", _("Other")


class AcademicStanding(models.TextChoices):
    EXCELLENT = "excellent", _("Excellent")
    VERY_GOOD = "very_good", _("Very Good")
    GOOD = "good", _("Good")
    SATISFACTORY = "satisfactory", _("Satisfactory")
    PASS = "pass", _("Pass")


# -----------------------------------------------------------------------------
# Abstract Base
# -----------------------------------------------------------------------------


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# -----------------------------------------------------------------------------
# Courses & Graduates
# -----------------------------------------------------------------------------


class Course(TimestampedModel):
    """A course/programme graduates are enrolled in. Looked up by exact name."""

    name = models.CharField(max_length=255, unique=True)
    code = models.CharField(max_length=50, null=True, blank=True)

    class Meta:
        db_table = "courses"
        ordering = ["name"]

    def __str__(self):
        return self.name


def default_employment_status() -> dict:
    return {
        "status": EmploymentStatus.UNEMPLOYED.value,
        "job_title": None,
        "company": None,
        "salary": None,
        "start_date": None,
    }


class Graduate(TimestampedModel):
    """
    A graduate record.

    Email and (non-empty) student_id are natural keys: the database rejects a
    second record claiming either one. Employment details live in a single
    nested ``employment_status`` structure.
    """

    # Identity
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255, unique=True)
    phone = models.CharField(max_length=255, null=True, blank=True)
    address = models.CharField(max_length=255, null=True, blank=True)
    student_id = models.CharField(max_length=255, null=True, blank=True)

    # Academic
    course = models.ForeignKey(
        Course,
        on_delete=models.PROTECT,
        related_name="graduates",
    )
    graduation_year = models.PositiveSmallIntegerField(db_index=True)
    gpa = models.DecimalField(max_digits=3, decimal_places=2, null=True, blank=True)
    academic_standing = models.CharField(
        max_length=20, choices=AcademicStanding.choices, null=True, blank=True
    )

    # Employment: {status, job_title, company, salary, start_date}
    employment_status = models.JSONField(default=default_employment_status)

    # Lists
    skills = models.JSONField(default=list, blank=True)
    certifications = models.JSONField(
        default=list,
        blank=True,
        help_text="List of {name, issuer, date_obtained}",
    )

    # Preferences
    allow_employer_contact = models.BooleanField(default=True)
    job_search_active = models.BooleanField(default=True)
    privacy_settings = models.JSONField(default=dict, blank=True)

    # Derived
    profile_completion_percentage = models.PositiveSmallIntegerField(default=0)

    class Meta:
        db_table = "graduates"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["student_id"],
                condition=Q(student_id__isnull=False) & ~Q(student_id=""),
                name="unique_graduate_student_id",
            ),
        ]
        indexes = [
            models.Index(
                fields=["course", "graduation_year"], name="graduates_course_year_idx"
            ),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}>"

    @property
    def employment(self) -> dict:
        """Employment structure with all keys present."""
        return {**default_employment_status(), **(self.employment_status or {})}

    def profile_checklist(self) -> dict[str, bool]:
        """Which profile attributes are filled in."""
        employment = self.employment
        return {
            "name": bool(self.name),
            "email": bool(self.email),
            "phone": bool(self.phone),
            "address": bool(self.address),
            "student_id": bool(self.student_id),
            "course": self.course_id is not None,
            "graduation_year": bool(self.graduation_year),
            "gpa": self.gpa is not None,
            "academic_standing": bool(self.academic_standing),
            "employment": bool(employment.get("status"))
            and (
                employment["status"] != EmploymentStatus.EMPLOYED
                or bool(employment.get("job_title"))
            ),
            "skills": bool(self.skills),
            "certifications": bool(self.certifications),
        }

    def calculate_profile_completion(self) -> int:
        checklist = self.profile_checklist()
        completed = sum(1 for filled in checklist.values() if filled)
        return round(completed / len(checklist) * 100)

    def update_profile_completion(self) -> int:
        """Recompute and store profile_completion_percentage."""
        self.profile_completion_percentage = self.calculate_profile_completion()
        self.save(update_fields=["profile_completion_percentage", "updated_at"])
        return self.profile_completion_percentage
