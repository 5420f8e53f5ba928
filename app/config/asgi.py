"""
ASGI config for the payment gateway service.

Exposes the ASGI callable as a module-level variable named `application`
for Uvicorn. All traffic is plain HTTP; Stripe calls are synchronous, so
views run in Django's thread pool under ASGI.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
