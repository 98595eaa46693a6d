from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import F, Q


class Subject(models.Model):
    name = models.CharField(max_length=120, unique=True)
    code = models.CharField(max_length=20, unique=True)
    description = models.TextField(blank=True)
    credits = models.PositiveSmallIntegerField(
        default=1, validators=[MinValueValidator(1), MaxValueValidator(10)]
    )
    teachers = models.ManyToManyField(
        settings.AUTH_USER_MODEL, related_name="teaching_subjects", blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def save(self, *args, **kwargs):
        self.code = (self.code or "").strip().upper()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.code} {self.name}"


class SchoolClass(models.Model):
    name = models.CharField(max_length=64)
    grade = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    section = models.CharField(max_length=8)
    capacity = models.PositiveIntegerField(default=30, validators=[MinValueValidator(1)])
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        related_name="homeroom_classes",
        on_delete=models.SET_NULL,
    )
    subjects = models.ManyToManyField(Subject, related_name="classes", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["grade", "section"]
        unique_together = [("grade", "section")]
        verbose_name_plural = "classes"

    def __str__(self):
        return self.name or f"Grade {self.grade}{self.section}"


class Exam(models.Model):
    TYPE_CHOICES = [
        ("QUIZ", "QUIZ"),
        ("MIDTERM", "MIDTERM"),
        ("FINAL", "FINAL"),
        ("ASSIGNMENT", "ASSIGNMENT"),
        ("PROJECT", "PROJECT"),
    ]
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    exam_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    school_class = models.ForeignKey(SchoolClass, related_name="exams", on_delete=models.CASCADE)
    subject = models.ForeignKey(Subject, related_name="exams", on_delete=models.CASCADE)
    date = models.DateTimeField()
    duration = models.PositiveIntegerField(help_text="minutes", validators=[MinValueValidator(1)])
    total_marks = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    pass_marks = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.CheckConstraint(
                condition=Q(pass_marks__lte=F("total_marks")),
                name="exam_pass_marks_lte_total",
            ),
        ]

    def __str__(self):
        return self.title

    def is_pass(self, marks) -> bool:
        return marks is not None and marks >= self.pass_marks


class ExamResult(models.Model):
    exam = models.ForeignKey(Exam, related_name="results", on_delete=models.CASCADE)
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="exam_results", on_delete=models.CASCADE
    )
    marks_obtained = models.DecimalField(max_digits=6, decimal_places=2)
    grade = models.CharField(max_length=4, blank=True)
    remarks = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [("exam", "student")]

    def clean(self):
        if self.marks_obtained is None:
            return
        if self.marks_obtained < 0:
            raise ValidationError({"marks_obtained": "Marks cannot be negative"})
        if self.marks_obtained > self.exam.total_marks:
            raise ValidationError(
                {"marks_obtained": f"Marks cannot exceed total marks ({self.exam.total_marks})"}
            )

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)

    @property
    def percentage(self) -> float:
        total = self.exam.total_marks
        return float(self.marks_obtained) / total * 100 if total else 0

    @property
    def passed(self) -> bool:
        return self.exam.is_pass(self.marks_obtained)


class SubjectPerformance(models.Model):
    TREND_CHOICES = [("UP", "UP"), ("DOWN", "DOWN"), ("STABLE", "STABLE")]
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="subject_performance", on_delete=models.CASCADE
    )
    subject = models.ForeignKey(Subject, on_delete=models.CASCADE)
    academic_year = models.CharField(max_length=9)
    semester = models.CharField(max_length=16, blank=True)
    current_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    current_grade = models.CharField(max_length=4, blank=True)
    trend = models.CharField(max_length=8, choices=TREND_CHOICES, default="STABLE")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [("student", "subject", "academic_year", "semester")]
