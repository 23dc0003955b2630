"""Test server configuration for the demo app."""
from pathlib import Path

# Templates rendered under /pages/<name>
VIEWS_DIR = Path(__file__).parent / 'views'

# Serves webapp/js and webapp/css
STATIC_ROOT = Path(__file__).parent / 'webapp'

# Development settings
DEBUG = True
HOST = '127.0.0.1'
PORT = 8000
