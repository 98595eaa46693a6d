from django.db import models


class EmailTemplate(models.Model):
    key = models.SlugField(unique=True)
    subject_template = models.CharField(max_length=200)
    html_template_path = models.CharField(max_length=200)
    text_template_path = models.CharField(max_length=200, blank=True, null=True)

    def __str__(self):
        return self.key


class MessageLog(models.Model):
    application = models.ForeignKey(
        "admissions.AdmissionApplication", related_name="messages", on_delete=models.CASCADE
    )
    template = models.ForeignKey(EmailTemplate, on_delete=models.PROTECT)
    # distinguishes repeat sends of one template, e.g. the status it announced
    event = models.CharField(max_length=64)
    email = models.EmailField()
    sent_at = models.DateTimeField(auto_now_add=True)
    provider_id = models.CharField(max_length=128, blank=True, null=True)

    class Meta:
        unique_together = [("application", "template", "event")]


class EmailEvent(models.Model):
    message = models.ForeignKey(MessageLog, on_delete=models.SET_NULL, null=True, blank=True)
    event = models.CharField(max_length=32)
    provider_id = models.CharField(max_length=128, blank=True, null=True)
    email = models.EmailField()
    timestamp = models.DateTimeField(auto_now_add=True)
    payload = models.JSONField(default=dict, blank=True)
