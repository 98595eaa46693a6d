from django.contrib import admin
from .models import Announcement, Inquiry

@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ("title", "announcement_type", "priority", "publish_date", "is_public", "is_active")
    list_filter = ("announcement_type", "priority", "is_public", "is_active")
    search_fields = ("title", "content")
    autocomplete_fields = ("school_class", "created_by")

@admin.register(Inquiry)
class InquiryAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "topic", "status", "created_at")
    list_filter = ("topic", "status")
    search_fields = ("name", "email", "subject")
