"""
Contact Submission URL Configuration
"""
from django.urls import path

from .views import SubmitFormView

app_name = 'contact'

# Public URLs (no auth required)
urlpatterns = [
    path('submit-form', SubmitFormView.as_view(), name='submit'),
]
