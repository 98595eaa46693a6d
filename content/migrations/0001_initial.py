import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("academics", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Announcement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("content", models.TextField()),
                ("announcement_type", models.CharField(choices=[("GENERAL", "GENERAL"), ("ACADEMIC", "ACADEMIC"), ("EVENT", "EVENT"), ("URGENT", "URGENT")], default="GENERAL", max_length=16)),
                ("priority", models.PositiveSmallIntegerField(default=3, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ("is_public", models.BooleanField(default=False)),
                ("publish_date", models.DateTimeField()),
                ("expiry_date", models.DateTimeField(blank=True, null=True)),
                ("event_date", models.DateField(blank=True, null=True)),
                ("start_time", models.CharField(blank=True, max_length=8)),
                ("end_time", models.CharField(blank=True, max_length=8)),
                ("location", models.CharField(blank=True, max_length=200)),
                ("event_category", models.CharField(blank=True, max_length=16)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="announcements_created", to=settings.AUTH_USER_MODEL)),
                ("school_class", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="announcements", to="academics.schoolclass")),
            ],
            options={
                "ordering": ["-priority", "-publish_date"],
            },
        ),
        migrations.CreateModel(
            name="Inquiry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(blank=True, max_length=32)),
                ("topic", models.CharField(choices=[("Admissions", "Admissions"), ("Academic", "Academic"), ("Financial", "Financial"), ("General", "General")], default="General", max_length=32)),
                ("subject", models.CharField(max_length=200)),
                ("body", models.TextField()),
                ("status", models.CharField(choices=[("OPEN", "OPEN"), ("IN_PROGRESS", "IN_PROGRESS"), ("RESOLVED", "RESOLVED")], default="OPEN", max_length=16)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name_plural": "inquiries",
            },
        ),
    ]
