from django.contrib import admin
from .models import User

@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "name", "role", "student_number", "school_class", "is_active")
    list_filter = ("role", "is_active")
    search_fields = ("email", "name", "student_number")
    autocomplete_fields = ("school_class",)
