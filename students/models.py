from django.db import models
from django.conf import settings


class ParentStudentLink(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="child_links", on_delete=models.CASCADE
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="parent_links", on_delete=models.CASCADE
    )
    active = models.BooleanField(default=True)
    relationship = models.CharField(max_length=32, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [("user", "student")]


class BehaviorRecord(models.Model):
    TYPE_CHOICES = [
        ("POSITIVE_RECOGNITION","POSITIVE_RECOGNITION"),
        ("MINOR_INFRACTION","MINOR_INFRACTION"),
        ("MAJOR_INFRACTION","MAJOR_INFRACTION"),
        ("ACADEMIC_DISHONESTY","ACADEMIC_DISHONESTY"),
    ]
    POSITIVE = {"POSITIVE_RECOGNITION"}
    NEGATIVE = {"MINOR_INFRACTION", "MAJOR_INFRACTION", "ACADEMIC_DISHONESTY"}

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="behavior_records", on_delete=models.CASCADE
    )
    record_type = models.CharField(max_length=32, choices=TYPE_CHOICES)
    description = models.TextField(blank=True)
    reported_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        related_name="behavior_reports",
        on_delete=models.SET_NULL,
    )
    created_at = models.DateTimeField(auto_now_add=True)
