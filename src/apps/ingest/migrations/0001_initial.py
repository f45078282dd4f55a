import django.core.serializers.json
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ImportRun",
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
                (
                    "source_file",
                    models.FileField(
                        blank=True,
                        help_text="Original uploaded spreadsheet",
                        upload_to="graduate_imports/%Y/%m/%d/",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the import was started"
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending Processing"),
                            ("COMPLETED", "Completed"),
                            ("FAILED", "Failed with Errors"),
                        ],
                        db_index=True,
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "total_rows",
                    models.IntegerField(default=0, help_text="Rows read from the file"),
                ),
                ("processed_rows", models.IntegerField(default=0)),
                (
                    "created_count",
                    models.IntegerField(default=0, help_text="New graduates created"),
                ),
                (
                    "updated_count",
                    models.IntegerField(
                        default=0,
                        help_text="Existing graduates updated (imports never update)",
                    ),
                ),
                (
                    "skipped_count",
                    models.IntegerField(
                        default=0, help_text="Invalid rows plus duplicate conflicts"
                    ),
                ),
                (
                    "valid_rows",
                    models.JSONField(
                        blank=True,
                        default=list,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                    ),
                ),
                (
                    "invalid_rows",
                    models.JSONField(
                        blank=True,
                        default=list,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                    ),
                ),
                (
                    "conflicts",
                    models.JSONField(
                        blank=True,
                        default=list,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                    ),
                ),
                (
                    "error_message",
                    models.TextField(
                        blank=True,
                        help_text="Top-level error if the run failed",
                        null=True,
                    ),
                ),
            ],
            options={
                "verbose_name": "Import Run",
                "verbose_name_plural": "Import Runs",
                "db_table": "ingest_import_runs",
                "ordering": ["-created_at"],
            },
        ),
    ]
