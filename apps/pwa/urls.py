"""
PWA URLs for NACK POS.
"""
from django.urls import path
from . import views

app_name = 'pwa'

urlpatterns = [
    path('manifest.json', views.manifest_json, name='manifest'),
    path('sw.js', views.service_worker_js, name='service_worker'),
]
