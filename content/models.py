from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Announcement(models.Model):
    TYPE_CHOICES = [
        ("GENERAL","GENERAL"),
        ("ACADEMIC","ACADEMIC"),
        ("EVENT","EVENT"),
        ("URGENT","URGENT"),
    ]

    title = models.CharField(max_length=200)
    content = models.TextField()
    announcement_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default="GENERAL")
    priority = models.PositiveSmallIntegerField(
        default=3, validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    school_class = models.ForeignKey(
        "academics.SchoolClass",
        null=True,
        blank=True,
        related_name="announcements",
        on_delete=models.SET_NULL,
    )
    is_public = models.BooleanField(default=False)
    publish_date = models.DateTimeField()
    expiry_date = models.DateTimeField(null=True, blank=True)
    # events only
    event_date = models.DateField(null=True, blank=True)
    start_time = models.CharField(max_length=8, blank=True)
    end_time = models.CharField(max_length=8, blank=True)
    location = models.CharField(max_length=200, blank=True)
    event_category = models.CharField(max_length=16, blank=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        "accounts.User",
        related_name="announcements_created",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-priority", "-publish_date"]

    def __str__(self):
        return self.title


class Inquiry(models.Model):
    TOPIC_CHOICES = [("Admissions","Admissions"),("Academic","Academic"),("Financial","Financial"),("General","General")]
    STATUS_CHOICES = [("OPEN","OPEN"),("IN_PROGRESS","IN_PROGRESS"),("RESOLVED","RESOLVED")]
    name = models.CharField(max_length=150)
    email = models.EmailField()
    phone = models.CharField(max_length=32, blank=True)
    topic = models.CharField(max_length=32, choices=TOPIC_CHOICES, default="General")
    subject = models.CharField(max_length=200)
    body = models.TextField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="OPEN")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "inquiries"
