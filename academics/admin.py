from django.contrib import admin
from .models import Exam, ExamResult, SchoolClass, Subject, SubjectPerformance

@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "credits")
    search_fields = ("code", "name")
    filter_horizontal = ("teachers",)

@admin.register(SchoolClass)
class SchoolClassAdmin(admin.ModelAdmin):
    list_display = ("name", "grade", "section", "capacity", "teacher")
    list_filter = ("grade",)
    search_fields = ("name", "section")
    filter_horizontal = ("subjects",)
    raw_id_fields = ("teacher",)

@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ("title", "exam_type", "school_class", "subject", "date", "total_marks", "pass_marks")
    list_filter = ("exam_type", "subject")
    search_fields = ("title",)

@admin.register(ExamResult)
class ExamResultAdmin(admin.ModelAdmin):
    list_display = ("exam", "student", "marks_obtained", "grade")
    search_fields = ("student__email", "student__name", "exam__title")
    raw_id_fields = ("student",)

@admin.register(SubjectPerformance)
class SubjectPerformanceAdmin(admin.ModelAdmin):
    list_display = ("student", "subject", "academic_year", "semester", "current_percentage", "trend")
    list_filter = ("academic_year", "trend")
    raw_id_fields = ("student",)
