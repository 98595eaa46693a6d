from django.utils import timezone
from rest_framework import serializers

from reporting.api import RULE
from .models import Exam


class SubjectSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120)
    code = serializers.CharField(max_length=20)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    credits = serializers.IntegerField(required=False, default=1)
    teacherIds = serializers.ListField(child=serializers.IntegerField(), required=False)

    def validate_code(self, value):
        return value.strip().upper()

    def validate_credits(self, value):
        if value < 1 or value > 10:
            raise serializers.ValidationError("Credits must be between 1 and 10", code=RULE)
        return value


class SchoolClassSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=64)
    grade = serializers.IntegerField()
    section = serializers.CharField(max_length=8)
    capacity = serializers.IntegerField(required=False, default=30)
    teacherId = serializers.IntegerField(required=False, allow_null=True)
    subjectIds = serializers.ListField(child=serializers.IntegerField(), required=False)

    def validate_grade(self, value):
        if value < 1 or value > 12:
            raise serializers.ValidationError("Grade must be between 1 and 12", code=RULE)
        return value

    def validate_capacity(self, value):
        if value < 1:
            raise serializers.ValidationError("Capacity must be at least 1", code=RULE)
        return value


class ExamSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    type = serializers.ChoiceField(choices=[c[0] for c in Exam.TYPE_CHOICES])
    classId = serializers.IntegerField()
    subjectId = serializers.IntegerField()
    date = serializers.DateTimeField()
    duration = serializers.IntegerField()
    totalMarks = serializers.IntegerField()
    passMarks = serializers.IntegerField()

    def validate_duration(self, value):
        if value < 1:
            raise serializers.ValidationError("Duration must be at least 1 minute", code=RULE)
        return value

    def validate_totalMarks(self, value):
        if value <= 0:
            raise serializers.ValidationError("Total marks must be greater than 0", code=RULE)
        return value

    def validate_passMarks(self, value):
        if value < 0:
            raise serializers.ValidationError("Pass marks cannot be negative", code=RULE)
        return value

    def validate_date(self, value):
        if value < timezone.now():
            raise serializers.ValidationError("Exam date cannot be in the past", code=RULE)
        return value

    def validate(self, attrs):
        total = attrs.get("totalMarks", getattr(self.instance, "total_marks", None))
        passing = attrs.get("passMarks", getattr(self.instance, "pass_marks", None))
        if total is not None and passing is not None and passing > total:
            raise serializers.ValidationError(
                {"passMarks": "Pass marks cannot exceed total marks"}, code=RULE
            )
        return attrs


class ExamResultSerializer(serializers.Serializer):
    studentId = serializers.IntegerField()
    marksObtained = serializers.DecimalField(max_digits=6, decimal_places=2)
    grade = serializers.CharField(required=False, allow_blank=True, max_length=4)
    remarks = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)

    def validate_marksObtained(self, value):
        if value < 0:
            raise serializers.ValidationError("Marks cannot be negative", code=RULE)
        return value
