import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

SCORE = [django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PerformanceReview",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("review_period", models.CharField(max_length=32)),
                ("academic_year", models.CharField(max_length=9)),
                ("teaching_quality", models.PositiveSmallIntegerField(validators=SCORE)),
                ("student_engagement", models.PositiveSmallIntegerField(validators=SCORE)),
                ("classroom_management", models.PositiveSmallIntegerField(validators=SCORE)),
                ("communication", models.PositiveSmallIntegerField(validators=SCORE)),
                ("professionalism", models.PositiveSmallIntegerField(validators=SCORE)),
                ("innovation", models.PositiveSmallIntegerField(validators=SCORE)),
                ("overall_rating", models.DecimalField(decimal_places=2, max_digits=3)),
                ("average_student_grade", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("parent_satisfaction", models.DecimalField(blank=True, decimal_places=2, max_digits=3, null=True)),
                ("completion_rate", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("goals_set", models.PositiveSmallIntegerField(default=0)),
                ("goals_achieved", models.PositiveSmallIntegerField(default=0)),
                ("strengths", models.TextField(blank=True)),
                ("areas_for_improvement", models.TextField(blank=True)),
                ("comments", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("reviewer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reviews_given", to=settings.AUTH_USER_MODEL)),
                ("teacher", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="performance_reviews", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
