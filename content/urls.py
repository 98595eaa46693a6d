from django.urls import path
from . import views

app_name = "content"

urlpatterns = [
    path("", views.home, name="home"),
    path("about/", views.about, name="about"),
    path("programs/", views.programs, name="programs"),
    path("news/", views.news, name="news"),
    path("contact/", views.contact, name="contact"),
    path("admissions/", views.admissions, name="admissions"),
    path("admissions/apply/", views.apply, name="apply"),
    path("admissions/track/", views.track, name="track"),
    path("announcements/", views.announcements, name="announcements"),
    # Legal/public pages
    path("terms/", views.terms, name="terms"),
    path("privacy/", views.privacy, name="privacy"),
]
