"""
WSGI config for the payment gateway service.

Used by Gunicorn and by Django's development server. The Stripe webhook
endpoint reads the raw request body, so no middleware here may consume
or rewrite it before the view runs.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
