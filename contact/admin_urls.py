"""
Contact Submission Admin URL Configuration

Bearer-token protected submission management.
"""
from django.urls import path

from .views import SubmissionCompleteView, SubmissionDetailView, SubmissionListView

app_name = 'contact_admin'

urlpatterns = [
    path('submissions', SubmissionListView.as_view(), name='submission-list'),
    path('submissions/<str:id>', SubmissionDetailView.as_view(), name='submission-detail'),
    path('submissions/<str:id>/complete', SubmissionCompleteView.as_view(), name='submission-complete'),
]
