"""
URL configuration for the contact intake service.

Paths keep the layout of the existing front end and admin console:
    /api/submit-form                          public intake
    /api/admin/login, /api/mobile/login       bearer token issue
    /api/admin/submissions[...]               submission management
"""
from django.urls import path, include

from accounts.urls import admin_urlpatterns as admin_login_urls
from accounts.urls import mobile_urlpatterns as mobile_login_urls

urlpatterns = [
    path('api/', include('contact.urls')),  # Public form intake
    path('api/admin/', include((admin_login_urls, 'admin_auth'))),  # Admin console login
    path('api/mobile/', include((mobile_login_urls, 'mobile_auth'))),  # Mobile client login
    path('api/admin/', include('contact.admin_urls')),  # Submission management
]
