import django.db.models.deletion
from django.db import migrations, models

import apps.core.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Course",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255, unique=True)),
                ("code", models.CharField(blank=True, max_length=50, null=True)),
            ],
            options={
                "db_table": "courses",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Graduate",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=255, unique=True)),
                ("phone", models.CharField(blank=True, max_length=255, null=True)),
                ("address", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "student_id",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                (
                    "graduation_year",
                    models.PositiveSmallIntegerField(db_index=True),
                ),
                (
                    "gpa",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=3, null=True
                    ),
                ),
                (
                    "academic_standing",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("excellent", "Excellent"),
                            ("very_good", "Very Good"),
                            ("good", "Good"),
                            ("satisfactory", "Satisfactory"),
                            ("pass", "Pass"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                (
                    "employment_status",
                    models.JSONField(
                        default=apps.core.models.default_employment_status
                    ),
                ),
                ("skills", models.JSONField(blank=True, default=list)),
                (
                    "certifications",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="List of {name, issuer, date_obtained}",
                    ),
                ),
                ("allow_employer_contact", models.BooleanField(default=True)),
                ("job_search_active", models.BooleanField(default=True)),
                ("privacy_settings", models.JSONField(blank=True, default=dict)),
                (
                    "profile_completion_percentage",
                    models.PositiveSmallIntegerField(default=0),
                ),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="graduates",
                        to="core.course",
                    ),
                ),
            ],
            options={
                "db_table": "graduates",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["course", "graduation_year"],
                        name="graduates_course_year_idx",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(
                            ("student_id__isnull", False),
                            models.Q(("student_id", ""), _negated=True),
                        ),
                        fields=("student_id",),
                        name="unique_graduate_student_id",
                    )
                ],
            },
        ),
    ]
