from django.urls import path

from .views import AdminLoginView, MobileLoginView

app_name = 'accounts'

# Admin console login
admin_urlpatterns = [
    path('login', AdminLoginView.as_view(), name='admin-login'),
]

# Mobile client login
mobile_urlpatterns = [
    path('login', MobileLoginView.as_view(), name='mobile-login'),
]

urlpatterns = admin_urlpatterns
