"""
ASGI config for the testcenter project.

Serves plain Django HTTP; there are no WebSocket routes.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "testcenter.settings")

application = get_asgi_application()
