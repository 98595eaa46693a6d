from rest_framework import serializers

from reporting.api import RULE
from .models import AttendanceRecord


class RecordSerializer(serializers.Serializer):
    studentId = serializers.IntegerField()
    status = serializers.ChoiceField(choices=[c[0] for c in AttendanceRecord.STATUS_CHOICES])
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class SessionSerializer(serializers.Serializer):
    classId = serializers.IntegerField()
    date = serializers.DateField()
    records = RecordSerializer(many=True)

    def validate_records(self, value):
        if not value:
            raise serializers.ValidationError("At least one attendance record is required", code=RULE)
        ids = [r["studentId"] for r in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Each student may appear only once", code=RULE)
        return value
