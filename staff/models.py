from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from reporting.metrics import quantize, review_overall

SCORE = [MinValueValidator(1), MaxValueValidator(5)]


class PerformanceReview(models.Model):
    SCORE_FIELDS = [
        "teaching_quality",
        "student_engagement",
        "classroom_management",
        "communication",
        "professionalism",
        "innovation",
    ]

    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="performance_reviews", on_delete=models.CASCADE
    )
    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        related_name="reviews_given",
        on_delete=models.SET_NULL,
    )
    review_period = models.CharField(max_length=32)
    academic_year = models.CharField(max_length=9)
    teaching_quality = models.PositiveSmallIntegerField(validators=SCORE)
    student_engagement = models.PositiveSmallIntegerField(validators=SCORE)
    classroom_management = models.PositiveSmallIntegerField(validators=SCORE)
    communication = models.PositiveSmallIntegerField(validators=SCORE)
    professionalism = models.PositiveSmallIntegerField(validators=SCORE)
    innovation = models.PositiveSmallIntegerField(validators=SCORE)
    overall_rating = models.DecimalField(max_digits=3, decimal_places=2)
    average_student_grade = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    parent_satisfaction = models.DecimalField(max_digits=3, decimal_places=2, null=True, blank=True)
    completion_rate = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    goals_set = models.PositiveSmallIntegerField(default=0)
    goals_achieved = models.PositiveSmallIntegerField(default=0)
    strengths = models.TextField(blank=True)
    areas_for_improvement = models.TextField(blank=True)
    comments = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def scores(self):
        return [getattr(self, name) for name in self.SCORE_FIELDS]

    def save(self, *args, **kwargs):
        self.overall_rating = quantize(review_overall(self.scores()))
        super().save(*args, **kwargs)
