from django.contrib import admin
from .models import BehaviorRecord, ParentStudentLink

@admin.register(ParentStudentLink)
class ParentStudentLinkAdmin(admin.ModelAdmin):
    list_display = ("user", "student", "relationship", "active", "created_at")
    list_filter = ("active",)
    search_fields = ("user__email", "student__email", "student__student_number")
    raw_id_fields = ("user", "student")

@admin.register(BehaviorRecord)
class BehaviorRecordAdmin(admin.ModelAdmin):
    list_display = ("student", "record_type", "reported_by", "created_at")
    list_filter = ("record_type",)
    raw_id_fields = ("student", "reported_by")
