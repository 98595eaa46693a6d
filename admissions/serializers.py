from django.utils.dateparse import parse_date
from rest_framework import serializers

from reporting.api import RULE
from students.serializers import valid_email
from .models import AdmissionApplication, ApplicationDocument


class ApplicationSerializer(serializers.Serializer):
    studentFirstName = serializers.CharField(max_length=100)
    studentLastName = serializers.CharField(max_length=100)
    studentDateOfBirth = serializers.CharField()
    studentGender = serializers.CharField(max_length=16)
    studentGrade = serializers.CharField(max_length=32)
    parentFirstName = serializers.CharField(max_length=100)
    parentLastName = serializers.CharField(max_length=100)
    parentEmail = serializers.CharField(max_length=254)
    parentPhone = serializers.CharField(max_length=32)
    parentAddress = serializers.CharField(max_length=255)
    parentOccupation = serializers.CharField(required=False, allow_blank=True, default="")
    previousSchool = serializers.CharField(required=False, allow_blank=True, default="")
    previousGrade = serializers.CharField(required=False, allow_blank=True, default="")
    reasonForTransfer = serializers.CharField(required=False, allow_blank=True, default="")
    extracurriculars = serializers.CharField(required=False, allow_blank=True, default="")
    medicalConditions = serializers.CharField(required=False, allow_blank=True, default="")
    specialNeeds = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_parentEmail(self, value):
        value = value.strip()
        if not valid_email(value):
            raise serializers.ValidationError("Invalid email format", code=RULE)
        return value

    def validate_studentDateOfBirth(self, value):
        # accept a plain date or the date part of an ISO timestamp
        parsed = None
        try:
            parsed = parse_date(value.strip()[:10])
        except ValueError:
            pass
        if parsed is None:
            raise serializers.ValidationError("Invalid date format", code=RULE)
        return parsed


class StatusSerializer(serializers.Serializer):
    status = serializers.CharField()
    note = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_status(self, value):
        value = value.strip().upper().replace(" ", "_")
        if value not in {c[0] for c in AdmissionApplication.STATUS_CHOICES}:
            raise serializers.ValidationError("Invalid application status", code=RULE)
        return value


class DocumentReviewSerializer(serializers.Serializer):
    status = serializers.CharField()

    def validate_status(self, value):
        value = value.strip().upper()
        if value not in {c[0] for c in ApplicationDocument.STATUS_CHOICES}:
            raise serializers.ValidationError("Invalid document status", code=RULE)
        return value
