"""
WSGI config for the tenderhub project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'tenderhub.config.settings')

application = get_wsgi_application()
