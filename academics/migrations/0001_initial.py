import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Subject",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120, unique=True)),
                ("code", models.CharField(max_length=20, unique=True)),
                ("description", models.TextField(blank=True)),
                ("credits", models.PositiveSmallIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(10)])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("teachers", models.ManyToManyField(blank=True, related_name="teaching_subjects", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="SchoolClass",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=64)),
                ("grade", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ("section", models.CharField(max_length=8)),
                ("capacity", models.PositiveIntegerField(default=30, validators=[django.core.validators.MinValueValidator(1)])),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("teacher", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="homeroom_classes", to=settings.AUTH_USER_MODEL)),
                ("subjects", models.ManyToManyField(blank=True, related_name="classes", to="academics.subject")),
            ],
            options={
                "verbose_name_plural": "classes",
                "ordering": ["grade", "section"],
                "unique_together": {("grade", "section")},
            },
        ),
        migrations.CreateModel(
            name="Exam",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("exam_type", models.CharField(choices=[("QUIZ", "QUIZ"), ("MIDTERM", "MIDTERM"), ("FINAL", "FINAL"), ("ASSIGNMENT", "ASSIGNMENT"), ("PROJECT", "PROJECT")], max_length=16)),
                ("date", models.DateTimeField()),
                ("duration", models.PositiveIntegerField(help_text="minutes", validators=[django.core.validators.MinValueValidator(1)])),
                ("total_marks", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("pass_marks", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("school_class", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="exams", to="academics.schoolclass")),
                ("subject", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="exams", to="academics.subject")),
            ],
            options={
                "ordering": ["-date"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("pass_marks__lte", models.F("total_marks"))), name="exam_pass_marks_lte_total"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ExamResult",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("marks_obtained", models.DecimalField(decimal_places=2, max_digits=6)),
                ("grade", models.CharField(blank=True, max_length=4)),
                ("remarks", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("exam", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="results", to="academics.exam")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="exam_results", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "unique_together": {("exam", "student")},
            },
        ),
        migrations.CreateModel(
            name="SubjectPerformance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("academic_year", models.CharField(max_length=9)),
                ("semester", models.CharField(blank=True, max_length=16)),
                ("current_percentage", models.DecimalField(decimal_places=2, max_digits=5)),
                ("current_grade", models.CharField(blank=True, max_length=4)),
                ("trend", models.CharField(choices=[("UP", "UP"), ("DOWN", "DOWN"), ("STABLE", "STABLE")], default="STABLE", max_length=8)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="subject_performance", to=settings.AUTH_USER_MODEL)),
                ("subject", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="academics.subject")),
            ],
            options={
                "unique_together": {("student", "subject", "academic_year", "semester")},
            },
        ),
    ]
