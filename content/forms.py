from django import forms

from .models import Inquiry


class ContactForm(forms.ModelForm):
    class Meta:
        model = Inquiry
        fields = ["name", "email", "phone", "topic", "subject", "body"]
        widgets = {"body": forms.Textarea(attrs={"rows": 5})}
        labels = {"body": "Message"}
