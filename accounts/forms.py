from allauth.account.forms import SignupForm as AllauthSignupForm
from django import forms

from .models import User

# Staff accounts are created by an administrator, never through signup
SELF_SERVICE_ROLES = [
    (User.STUDENT, "Student"),
    (User.PARENT, "Parent"),
]


class SignupForm(AllauthSignupForm):
    name = forms.CharField(max_length=150, label="Full name")
    role = forms.ChoiceField(choices=SELF_SERVICE_ROLES, initial=User.PARENT, label="I am a")

    def save(self, request):
        user = super().save(request)
        user.name = self.cleaned_data["name"].strip()
        user.role = self.cleaned_data["role"]
        user.save(update_fields=["name", "role"])
        return user
