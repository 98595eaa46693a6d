from rest_framework import serializers

from reporting.api import RULE
from students.serializers import valid_email


class TeacherSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.CharField(max_length=254)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
    qualification = serializers.CharField(required=False, allow_blank=True, default="")
    specialization = serializers.CharField(required=False, allow_blank=True, default="")
    experience = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    salary = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    joinDate = serializers.DateField(required=False, allow_null=True)
    subjectIds = serializers.ListField(child=serializers.IntegerField(), required=False)

    def validate_email(self, value):
        value = value.strip().lower()
        if not valid_email(value):
            raise serializers.ValidationError("Invalid email format", code=RULE)
        return value

    def validate_salary(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Salary cannot be negative", code=RULE)
        return value


class ReviewSerializer(serializers.Serializer):
    teacherId = serializers.IntegerField()
    reviewPeriod = serializers.CharField(max_length=32)
    academicYear = serializers.CharField(max_length=9)
    teachingQuality = serializers.IntegerField()
    studentEngagement = serializers.IntegerField()
    classroomManagement = serializers.IntegerField()
    communication = serializers.IntegerField()
    professionalism = serializers.IntegerField()
    innovation = serializers.IntegerField()
    averageStudentGrade = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)
    parentSatisfaction = serializers.DecimalField(max_digits=3, decimal_places=2, required=False, allow_null=True)
    completionRate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)
    goalsSet = serializers.IntegerField(required=False, default=0, min_value=0)
    goalsAchieved = serializers.IntegerField(required=False, default=0, min_value=0)
    strengths = serializers.CharField(required=False, allow_blank=True, default="")
    areasForImprovement = serializers.CharField(required=False, allow_blank=True, default="")
    comments = serializers.CharField(required=False, allow_blank=True, default="")

    SCORE_KEYS = {
        "teachingQuality": "teaching_quality",
        "studentEngagement": "student_engagement",
        "classroomManagement": "classroom_management",
        "communication": "communication",
        "professionalism": "professionalism",
        "innovation": "innovation",
    }

    def validate(self, attrs):
        for key in self.SCORE_KEYS:
            if not 1 <= attrs[key] <= 5:
                raise serializers.ValidationError(
                    {key: "All ratings must be between 1 and 5"}, code=RULE
                )
        return attrs

    def review_fields(self):
        data = self.validated_data
        fields = {model: data[key] for key, model in self.SCORE_KEYS.items()}
        fields.update(
            review_period=data["reviewPeriod"],
            academic_year=data["academicYear"],
            average_student_grade=data.get("averageStudentGrade"),
            parent_satisfaction=data.get("parentSatisfaction"),
            completion_rate=data.get("completionRate"),
            goals_set=data["goalsSet"],
            goals_achieved=data["goalsAchieved"],
            strengths=data["strengths"],
            areas_for_improvement=data["areasForImprovement"],
            comments=data["comments"],
        )
        return fields
