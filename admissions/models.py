from django.db import models


class AdmissionApplication(models.Model):
    STATUS_CHOICES = [
        ("PENDING","PENDING"),
        ("UNDER_REVIEW","UNDER_REVIEW"),
        ("INTERVIEW_SCHEDULED","INTERVIEW_SCHEDULED"),
        ("ACCEPTED","ACCEPTED"),
        ("REJECTED","REJECTED"),
        ("WAITLISTED","WAITLISTED"),
    ]
    OPEN_STATUSES = ("PENDING", "UNDER_REVIEW", "INTERVIEW_SCHEDULED")

    application_id = models.CharField(max_length=20, unique=True)
    student_first_name = models.CharField(max_length=100)
    student_last_name = models.CharField(max_length=100)
    student_date_of_birth = models.DateField()
    student_gender = models.CharField(max_length=16)
    student_grade = models.CharField(max_length=32, db_index=True)
    parent_first_name = models.CharField(max_length=100)
    parent_last_name = models.CharField(max_length=100)
    parent_email = models.EmailField()
    parent_phone = models.CharField(max_length=32)
    parent_address = models.CharField(max_length=255)
    parent_occupation = models.CharField(max_length=100, blank=True)
    previous_school = models.CharField(max_length=200, blank=True)
    previous_grade = models.CharField(max_length=32, blank=True)
    reason_for_transfer = models.TextField(blank=True)
    extracurriculars = models.TextField(blank=True)
    medical_conditions = models.TextField(blank=True)
    special_needs = models.TextField(blank=True)
    status = models.CharField(max_length=24, choices=STATUS_CHOICES, default="PENDING", db_index=True)
    submitted_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-submitted_at"]

    def __str__(self):
        return self.application_id

    @property
    def student_name(self) -> str:
        return f"{self.student_first_name} {self.student_last_name}".strip()

    @property
    def parent_name(self) -> str:
        return f"{self.parent_first_name} {self.parent_last_name}".strip()


class ApplicationTimeline(models.Model):
    application = models.ForeignKey(
        AdmissionApplication, related_name="timeline", on_delete=models.CASCADE
    )
    status = models.CharField(max_length=120)
    description = models.CharField(max_length=255)
    completed = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]


class ApplicationDocument(models.Model):
    STATUS_CHOICES = [
        ("PENDING","PENDING"),
        ("APPROVED","APPROVED"),
        ("REJECTED","REJECTED"),
    ]
    application = models.ForeignKey(
        AdmissionApplication, related_name="documents", on_delete=models.CASCADE
    )
    document_type = models.CharField(max_length=100)
    file_name = models.CharField(max_length=200)
    file_url = models.CharField(max_length=500, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="PENDING")
    reviewed_at = models.DateTimeField(null=True, blank=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [("application", "document_type")]
        ordering = ["uploaded_at", "id"]
