import datetime

import pytest
from django.utils import timezone

from academics.models import Exam, SchoolClass, Subject
from accounts.models import User
from mailer.models import EmailTemplate

MODEL_BACKEND = "django.contrib.auth.backends.ModelBackend"


@pytest.fixture(autouse=True)
def school_settings(settings):
    settings.REPORT_FANOUT_WORKERS = 0
    settings.AXES_ENABLED = False
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    settings.DEFAULT_STUDENT_PASSWORD = ""
    settings.CURRENCY_SYMBOL = "$"
    settings.CURRENCY_POSITION = "before"
    return settings


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role, email=None, **fields):
        counter["n"] += 1
        email = email or f"{role.lower()}{counter['n']}@school.test"
        fields.setdefault("name", f"{role.title()} {counter['n']}")
        return User.objects.create_user(email=email, password=None, role=role, **fields)

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(User.ADMIN, email="admin@school.test", name="Ada Admin")


@pytest.fixture
def teacher(make_user):
    return make_user(User.TEACHER, email="teacher@school.test", name="Tom Teacher", experience=5)


@pytest.fixture
def parent(make_user):
    return make_user(User.PARENT, email="parent@school.test", name="Pat Parent")


@pytest.fixture
def school_class(db, teacher):
    return SchoolClass.objects.create(name="Grade 9-A", grade=9, section="A", capacity=30, teacher=teacher)


@pytest.fixture
def subject(db):
    return Subject.objects.create(name="Mathematics", code="MATH", credits=4)


@pytest.fixture
def student(make_user, school_class):
    return make_user(
        User.STUDENT,
        email="student@school.test",
        name="Sam Student",
        student_number="STU001",
        grade_level="Grade 9",
        school_class=school_class,
    )


@pytest.fixture
def exam(school_class, subject):
    return Exam.objects.create(
        title="Algebra midterm",
        exam_type="MIDTERM",
        school_class=school_class,
        subject=subject,
        date=timezone.now() - datetime.timedelta(days=3),
        duration=60,
        total_marks=100,
        pass_marks=40,
    )


@pytest.fixture
def login(client):
    """Sign ``user`` in on the test client and return the client."""
    def _login(user):
        client.force_login(user, backend=MODEL_BACKEND)
        return client
    return _login


@pytest.fixture
def email_templates(db):
    # data migrations are skipped under --nomigrations
    received = EmailTemplate.objects.create(
        key="application_received",
        subject_template="{school}: application {application_id} received",
        html_template_path="mailer/application_received.html",
        text_template_path="mailer/application_received.txt",
    )
    status = EmailTemplate.objects.create(
        key="application_status",
        subject_template="{school}: update on application {application_id}",
        html_template_path="mailer/application_status.html",
        text_template_path="mailer/application_status.txt",
    )
    return received, status
