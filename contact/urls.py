"""
Contact Form URL Configuration

Mounted at /api/contact by the project URLconf.
"""
from django.urls import path
from .views import ContactFormSubmitView

app_name = 'contact'

urlpatterns = [
    path('', ContactFormSubmitView.as_view(), name='submit'),
    path('/', ContactFormSubmitView.as_view(), name='submit-slash'),
]
