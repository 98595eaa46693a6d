import re

from rest_framework import serializers

from accounts.models import User
from reporting.api import RULE

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value or ""))


class StudentSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.CharField(max_length=254)
    studentNumber = serializers.CharField(max_length=32)
    grade = serializers.CharField(max_length=32)
    classId = serializers.IntegerField(required=False, allow_null=True)
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
    dateOfBirth = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(
        choices=[c[0] for c in User.GENDER_CHOICES], required=False, allow_blank=True, default=""
    )
    parentName = serializers.CharField(required=False, allow_blank=True, default="")
    parentEmail = serializers.CharField(required=False, allow_blank=True, default="")
    parentPhone = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_email(self, value):
        value = value.strip().lower()
        if not valid_email(value):
            raise serializers.ValidationError("Invalid email format", code=RULE)
        return value

    def validate_parentEmail(self, value):
        value = (value or "").strip().lower()
        if value and not valid_email(value):
            raise serializers.ValidationError("Invalid parent email format", code=RULE)
        return value

    def validate_studentNumber(self, value):
        return value.strip()


class BehaviorSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=[
        "POSITIVE_RECOGNITION", "MINOR_INFRACTION", "MAJOR_INFRACTION", "ACADEMIC_DISHONESTY",
    ])
    description = serializers.CharField(required=False, allow_blank=True, default="")
