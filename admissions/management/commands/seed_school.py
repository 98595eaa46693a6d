import datetime
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from academics.models import SchoolClass, Subject
from accounts.models import User
from admissions.models import AdmissionApplication, ApplicationDocument, ApplicationTimeline
from content.models import Announcement
from financials.models import Fee

DOCUMENTS = [
    ("Birth Certificate", "birth_certificate.pdf"),
    ("Academic Transcripts", "transcripts.pdf"),
    ("Medical Records", "medical_records.pdf"),
]


class Command(BaseCommand):
    help = "Create demo users, classes, fees and the sample admission application (idempotent)"

    def add_arguments(self, parser):
        parser.add_argument("--password", default="password123", help="Password for the demo accounts")

    def _user(self, email, password, **fields):
        user = User.objects.filter(email=email).first()
        if user is None:
            user = User.objects.create_user(email=email, password=password, **fields)
            self.stdout.write(f"Created {fields.get('role', 'user')} {email}")
        return user

    @transaction.atomic
    def handle(self, *args, **options):
        password = options["password"]
        admin = self._user(
            "admin@school.com", password, name="John Admin", role=User.ADMIN, is_staff=True, is_superuser=True
        )
        teacher = self._user(
            "teacher@school.com",
            password,
            name="Sarah Wilson",
            role=User.TEACHER,
            qualification="M.Ed. Mathematics",
            specialization="Mathematics",
            experience=5,
            date_of_joining=datetime.date(2019, 8, 1),
        )
        self._user("parent@school.com", password, name="David Smith", role=User.PARENT)

        math, _ = Subject.objects.get_or_create(
            code="MATH", defaults={"name": "Mathematics", "credits": 4}
        )
        english, _ = Subject.objects.get_or_create(
            code="ELA", defaults={"name": "English Language Arts", "credits": 3}
        )
        math.teachers.add(teacher)

        grade9a, _ = SchoolClass.objects.get_or_create(
            grade=9, section="A", defaults={"name": "Grade 9-A", "capacity": 30, "teacher": teacher}
        )
        grade9a.subjects.add(math, english)

        self._user(
            "student@school.com",
            password,
            name="Alex Thompson",
            role=User.STUDENT,
            student_number="STU001",
            grade_level="Grade 9",
            school_class=grade9a,
            parent_name="David Smith",
            parent_email="parent@school.com",
        )

        application, created = AdmissionApplication.objects.get_or_create(
            application_id="APP-2024-001234",
            defaults={
                "student_first_name": "John",
                "student_last_name": "Smith",
                "student_date_of_birth": datetime.date(2010, 5, 15),
                "student_gender": "male",
                "student_grade": "grade-8",
                "parent_first_name": "Robert",
                "parent_last_name": "Smith",
                "parent_email": "robert.smith@email.com",
                "parent_phone": "+1-555-0123",
                "parent_address": "123 Main Street, Anytown, ST 12345",
                "parent_occupation": "Engineer",
                "previous_school": "Riverside Elementary",
                "previous_grade": "grade-7",
                "status": "PENDING",
            },
        )
        if not application.timeline.filter(status="Application Submitted").exists():
            ApplicationTimeline.objects.create(
                application=application,
                status="Application Submitted",
                description="Application received and logged in system",
                completed=True,
            )
        for document_type, file_name in DOCUMENTS:
            ApplicationDocument.objects.get_or_create(
                application=application,
                document_type=document_type,
                defaults={"file_name": file_name, "file_url": f"/documents/{file_name}"},
            )

        Fee.objects.get_or_create(
            title="Tuition Fee - Semester 1",
            defaults={
                "fee_type": "TUITION",
                "amount": Decimal("2500.00"),
                "description": "Regular tuition fee for first semester",
                "due_date": datetime.date(timezone.localdate().year, 3, 31),
            },
        )
        Announcement.objects.get_or_create(
            title="Welcome Back to School!",
            defaults={
                "content": "We are excited to welcome all students back for the new academic year.",
                "announcement_type": "GENERAL",
                "priority": 5,
                "is_public": True,
                "publish_date": timezone.now(),
                "created_by": admin,
            },
        )
        self.stdout.write(
            self.style.SUCCESS(
                f"Seed complete; sample application {application.application_id}"
                f" ({'created' if created else 'already present'})"
            )
        )
