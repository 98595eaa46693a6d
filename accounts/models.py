from django.contrib.auth.models import AbstractUser
from django.contrib.auth.base_user import BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The Email must be set")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.ADMIN)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(email, password, **extra_fields)

    def students(self):
        return self.filter(role=User.STUDENT)

    def teachers(self):
        return self.filter(role=User.TEACHER)

    def parents(self):
        return self.filter(role=User.PARENT)


class User(AbstractUser):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"
    PARENT = "PARENT"
    ROLE_CHOICES = [
        (ADMIN, "ADMIN"),
        (TEACHER, "TEACHER"),
        (STUDENT, "STUDENT"),
        (PARENT, "PARENT"),
    ]
    GENDER_CHOICES = [("male", "male"), ("female", "female"), ("other", "other")]

    username = None
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=STUDENT, db_index=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=16, choices=GENDER_CHOICES, blank=True)
    # student
    student_number = models.CharField(max_length=32, unique=True, null=True, blank=True)
    grade_level = models.CharField(max_length=32, blank=True)
    school_class = models.ForeignKey(
        "academics.SchoolClass",
        null=True,
        blank=True,
        related_name="students",
        on_delete=models.SET_NULL,
    )
    parent_name = models.CharField(max_length=150, blank=True)
    parent_email = models.EmailField(blank=True)
    parent_phone = models.CharField(max_length=32, blank=True)
    # teacher
    qualification = models.CharField(max_length=200, blank=True)
    specialization = models.CharField(max_length=200, blank=True)
    experience = models.PositiveIntegerField(null=True, blank=True)
    salary = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    date_of_joining = models.DateField(null=True, blank=True)
    bank_account = models.CharField(max_length=64, blank=True)

    EMAIL_FIELD = "email"
    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []
    objects = UserManager()

    def __str__(self):
        return self.name or self.email

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return self.name or full or self.email

    @property
    def is_admin_role(self) -> bool:
        return self.role == self.ADMIN
