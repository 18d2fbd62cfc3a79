# Creates the Flask app (App Factory)
from flask import Flask, render_template
import os
import logging
from .config import Config
from .auth import Authenticator
from .credentials import CredentialStore
from .documents import DocumentStore
from .images import ImageStore


# Application Factory Function
def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    # Ensure folders exist
    os.makedirs(app.config['DATA_FOLDER'], exist_ok=True)
    os.makedirs(app.config['IMAGE_FOLDER'], exist_ok=True)

    # Stores shared by every request
    app.extensions['cms.documents'] = DocumentStore(
        app.config['DATA_FOLDER'], app.config['DOCUMENT_EXTENSIONS'])
    app.extensions['cms.images'] = ImageStore(
        app.config['IMAGE_FOLDER'], app.config['IMAGE_EXTENSIONS'])
    app.extensions['cms.authenticator'] = Authenticator(
        CredentialStore(app.config['CREDENTIALS_FILE']),
        iterations=app.config['PASSWORD_HASH_ITERATIONS'],
    )

    # Import and register the blueprint from routes.py
    from .routes import cms as cms_blueprint
    app.register_blueprint(cms_blueprint)

    # Filesystem failures (permissions, full disk) become a 500 page
    @app.errorhandler(OSError)
    def storage_error(e):
        app.logger.exception('Storage operation failed')
        return render_template('error.html'), 500

    # Logging configuration (DEBUG level by default)
    if not app.logger.handlers:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s %(levelname)s %(name)s - %(message)s')
    app.logger.setLevel(logging.DEBUG)
    app.logger.debug('Application created and configured')

    return app
