"""
WSGI config for the cardapio project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'cardapio.settings')

application = get_wsgi_application()
