"""Settings for the test suite."""
import os

os.environ.setdefault('DEBUG', '1')

from .settings import *  # noqa: E402,F401,F403

ALLOWED_HOSTS = ['testserver', 'localhost', '127.0.0.1']
