import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AdmissionApplication",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("application_id", models.CharField(max_length=20, unique=True)),
                ("student_first_name", models.CharField(max_length=100)),
                ("student_last_name", models.CharField(max_length=100)),
                ("student_date_of_birth", models.DateField()),
                ("student_gender", models.CharField(max_length=16)),
                ("student_grade", models.CharField(db_index=True, max_length=32)),
                ("parent_first_name", models.CharField(max_length=100)),
                ("parent_last_name", models.CharField(max_length=100)),
                ("parent_email", models.EmailField(max_length=254)),
                ("parent_phone", models.CharField(max_length=32)),
                ("parent_address", models.CharField(max_length=255)),
                ("parent_occupation", models.CharField(blank=True, max_length=100)),
                ("previous_school", models.CharField(blank=True, max_length=200)),
                ("previous_grade", models.CharField(blank=True, max_length=32)),
                ("reason_for_transfer", models.TextField(blank=True)),
                ("extracurriculars", models.TextField(blank=True)),
                ("medical_conditions", models.TextField(blank=True)),
                ("special_needs", models.TextField(blank=True)),
                ("status", models.CharField(choices=[("PENDING", "PENDING"), ("UNDER_REVIEW", "UNDER_REVIEW"), ("INTERVIEW_SCHEDULED", "INTERVIEW_SCHEDULED"), ("ACCEPTED", "ACCEPTED"), ("REJECTED", "REJECTED"), ("WAITLISTED", "WAITLISTED")], db_index=True, default="PENDING", max_length=24)),
                ("submitted_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-submitted_at"],
            },
        ),
        migrations.CreateModel(
            name="ApplicationTimeline",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(max_length=120)),
                ("description", models.CharField(max_length=255)),
                ("completed", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("application", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="timeline", to="admissions.admissionapplication")),
            ],
            options={
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="ApplicationDocument",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("document_type", models.CharField(max_length=100)),
                ("file_name", models.CharField(max_length=200)),
                ("file_url", models.CharField(blank=True, max_length=500)),
                ("status", models.CharField(choices=[("PENDING", "PENDING"), ("APPROVED", "APPROVED"), ("REJECTED", "REJECTED")], default="PENDING", max_length=16)),
                ("reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                ("application", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="documents", to="admissions.admissionapplication")),
            ],
            options={
                "ordering": ["uploaded_at", "id"],
                "unique_together": {("application", "document_type")},
            },
        ),
    ]
