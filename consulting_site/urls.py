"""
URL configuration for the consulting website backend.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.urls import path, include

urlpatterns = [
    path('api/contact', include('contact.urls')),  # Public contact form (no auth)
]
