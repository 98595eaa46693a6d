from django.contrib import admin
from .models import PerformanceReview

@admin.register(PerformanceReview)
class PerformanceReviewAdmin(admin.ModelAdmin):
    list_display = ("teacher", "review_period", "academic_year", "overall_rating", "created_at")
    list_filter = ("academic_year", "review_period")
    search_fields = ("teacher__email", "teacher__name")
    raw_id_fields = ("teacher", "reviewer")
    readonly_fields = ("overall_rating",)
