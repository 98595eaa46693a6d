from django.contrib import admin

from .models import AdmissionApplication, ApplicationDocument, ApplicationTimeline


class TimelineInline(admin.TabularInline):
    model = ApplicationTimeline
    extra = 0
    readonly_fields = ("created_at",)


class DocumentInline(admin.TabularInline):
    model = ApplicationDocument
    extra = 0


@admin.register(AdmissionApplication)
class AdmissionApplicationAdmin(admin.ModelAdmin):
    list_display = ("application_id", "student_name", "student_grade", "status", "submitted_at")
    list_filter = ("status", "student_grade")
    search_fields = ("application_id", "student_first_name", "student_last_name", "parent_email")
    inlines = [TimelineInline, DocumentInline]
