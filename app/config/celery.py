"""
Celery configuration for the payment gateway service.

Celery runs the administrative payment jobs off the request path:
- payments.tasks.provision_gateway_customers (bulk customer provisioning)
- payments.tasks.delete_gateway_customers (sandbox cleanup)

Redis is both the message broker and result backend. Tasks are
auto-discovered from all installed Django apps.

Usage:
    from payments.tasks import provision_gateway_customers

    provision_gateway_customers.delay(page_size=100)

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
