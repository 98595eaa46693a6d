from django.contrib import admin
from .models import EmailTemplate, EmailEvent, MessageLog

@admin.register(EmailTemplate)
class EmailTemplateAdmin(admin.ModelAdmin):
    list_display = ("id", "key", "subject_template")

@admin.register(MessageLog)
class MessageLogAdmin(admin.ModelAdmin):
    list_display = ("id", "application", "template", "event", "email", "sent_at", "provider_id")
    search_fields = ("application__application_id", "email", "provider_id")

@admin.register(EmailEvent)
class EmailEventAdmin(admin.ModelAdmin):
    list_display = ("id", "message", "event", "email", "timestamp")
    list_filter = ("event",)
