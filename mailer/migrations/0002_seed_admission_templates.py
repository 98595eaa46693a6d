from django.db import migrations

TEMPLATES = [
    {
        "key": "application_received",
        "subject_template": "{school}: application {application_id} received",
        "html_template_path": "mailer/application_received.html",
        "text_template_path": "mailer/application_received.txt",
    },
    {
        "key": "application_status",
        "subject_template": "{school}: update on application {application_id}",
        "html_template_path": "mailer/application_status.html",
        "text_template_path": "mailer/application_status.txt",
    },
]


def forwards(apps, schema_editor):
    EmailTemplate = apps.get_model("mailer", "EmailTemplate")
    for row in TEMPLATES:
        EmailTemplate.objects.update_or_create(key=row["key"], defaults=row)


def backwards(apps, schema_editor):
    EmailTemplate = apps.get_model("mailer", "EmailTemplate")
    EmailTemplate.objects.filter(key__in=[row["key"] for row in TEMPLATES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("mailer", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(forwards, backwards),
    ]
