import os

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    FLASK_HOST = os.getenv('FLASK_HOST', '0.0.0.0')
    FLASK_PORT = int(os.getenv('FLASK_PORT', '5000'))
    FLASK_DEBUG = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'
    TESTING = False


    POSTGRES_HOST = os.getenv('POSTGRES_HOST', 'localhost')
    POSTGRES_PORT = int(os.getenv('POSTGRES_PORT', '5432'))
    POSTGRES_DB = os.getenv('POSTGRES_DB', 'movie_app')
    POSTGRES_USER = os.getenv('POSTGRES_USER', 'postgres')
    POSTGRES_PASSWORD = os.getenv('POSTGRES_PASSWORD', '')

    DB_POOL_MIN = int(os.getenv('DB_POOL_MIN', '1'))
    DB_POOL_MAX = int(os.getenv('DB_POOL_MAX', '10'))


    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(BASE_DIR, 'uploads'))
    UPLOAD_URL_PREFIX = '/uploads'
    # Off by default: replaced or deleted images stay on disk
    UPLOAD_DELETE_REPLACED = os.getenv('UPLOAD_DELETE_REPLACED', 'False').lower() == 'true'


    API_BASE_URL = os.getenv('API_BASE_URL', 'http://localhost:5000')
    API_TIMEOUT = float(os.getenv('API_TIMEOUT', '10'))
