"""Application configuration, read from the environment."""
import os

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_API_URL = 'https://api.openai.com/v1/chat/completions'
DEFAULT_MODEL = 'gpt-4o-mini'

SERVER_CONFIG = {
    'host': os.getenv('FLASK_HOST', '0.0.0.0'),
    'port': int(os.getenv('FLASK_PORT', '3000')),
    'debug': os.getenv('FLASK_DEBUG', '1') == '1',
}

LOGS_DIR = os.getenv('STUDIO_LOGS_DIR', os.path.join(BASE_DIR, 'logs'))


def get_openai_config():
    """Get the chat-completion settings.

    The key is looked up on every call so a test or a restarted worker sees
    the current environment. An empty key means "no remote service".
    """
    return {
        'api_key': os.getenv('OPENAI_API_KEY') or os.getenv('VITE_OPENAI_API_KEY', ''),
        'api_url': os.getenv('OPENAI_API_URL', DEFAULT_API_URL),
        'model': os.getenv('OPENAI_MODEL', DEFAULT_MODEL),
        'timeout': float(os.getenv('OPENAI_TIMEOUT', '15')),
    }
