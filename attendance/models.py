from django.conf import settings
from django.db import models


class AttendanceSession(models.Model):
    school_class = models.ForeignKey(
        "academics.SchoolClass", related_name="attendance_sessions", on_delete=models.CASCADE
    )
    date = models.DateField()
    taken_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [("school_class", "date")]
        ordering = ["-date", "-created_at"]


class AttendanceRecord(models.Model):
    STATUS_CHOICES = [
        ("PRESENT","PRESENT"),
        ("ABSENT","ABSENT"),
        ("LATE","LATE"),
        ("EXCUSED","EXCUSED"),
    ]
    session = models.ForeignKey(AttendanceSession, related_name="records", on_delete=models.CASCADE)
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="attendance_records", on_delete=models.CASCADE
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES)
    notes = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [("session", "student")]
