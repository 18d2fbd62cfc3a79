# Configuration settings
import os
from dotenv import load_dotenv

# This line loads the variables from your .env file
load_dotenv()


def _extensions(raw):
    return {ext.strip().lower().lstrip('.') for ext in raw.split(',') if ext.strip()}


# This class holds all the configuration variables for the app
class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-change-me')

    # Document directories, images and the credentials file all live on disk
    DATA_FOLDER = os.environ.get('DATA_FOLDER', os.path.join(os.getcwd(), 'data'))
    IMAGE_FOLDER = os.environ.get('IMAGE_FOLDER', os.path.join(os.getcwd(), 'images'))
    CREDENTIALS_FILE = os.environ.get('CREDENTIALS_FILE', os.path.join(os.getcwd(), 'users.yml'))

    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))
    DOCUMENT_EXTENSIONS = _extensions(os.environ.get('DOCUMENT_EXTENSIONS', 'txt,md'))
    IMAGE_EXTENSIONS = _extensions(os.environ.get('IMAGE_EXTENSIONS', 'jpg,png,svg'))

    PASSWORD_HASH_ITERATIONS = int(os.environ.get('PASSWORD_HASH_ITERATIONS', 200_000))
