from rest_framework import serializers

from reporting.api import RULE
from .services import EVENT_CATEGORIES, EVENT_PRIORITY


class EventSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    date = serializers.DateField()
    startTime = serializers.CharField(required=False, allow_blank=True, default="", max_length=8)
    endTime = serializers.CharField(required=False, allow_blank=True, default="", max_length=8)
    type = serializers.CharField(required=False, default="OTHER")
    location = serializers.CharField(required=False, allow_blank=True, default="")
    isPublic = serializers.BooleanField(required=False, default=True)
    priority = serializers.CharField(required=False, default="MEDIUM")

    def validate_type(self, value):
        value = value.strip().upper()
        if value not in EVENT_CATEGORIES:
            raise serializers.ValidationError("Invalid event type", code=RULE)
        return value

    def validate_priority(self, value):
        value = value.strip().upper()
        if value not in EVENT_PRIORITY:
            raise serializers.ValidationError("Priority must be LOW, MEDIUM or HIGH", code=RULE)
        return value
