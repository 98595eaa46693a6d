from django.urls import path
from . import api_views

app_name = "events"

urlpatterns = [
    path("", api_views.events, name="list"),
    path("<int:pk>/", api_views.event_detail, name="detail"),
]
