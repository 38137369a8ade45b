"""
ASGI config for docvault project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'docvault.settings')

application = get_asgi_application()
