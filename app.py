from flask import Flask, send_from_directory
from flask_cors import CORS
from config import Config
import atexit
import logging

from api import api
from database.movies_db import MoviesDB
from frontend.api_client import MovieApiClient
from frontend.views import ui
from metrics import metrics_endpoint

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(config=Config, database=None, api_client=None):
    app = Flask(__name__)
    app.config.from_object(config)

    CORS(app, resources={r'/api/*': {'origins': '*'}}, send_wildcard=True)

    if database is None:
        database = MoviesDB.from_config(config)
        atexit.register(database.close)
    if api_client is None:
        api_client = MovieApiClient(
            config.API_BASE_URL,
            timeout=config.API_TIMEOUT,
            upload_prefix=config.UPLOAD_URL_PREFIX
        )

    app.extensions['movies_db'] = database
    app.extensions['movie_client'] = api_client

    app.register_blueprint(api)
    app.register_blueprint(ui)

    @app.route(f"{config.UPLOAD_URL_PREFIX}/<path:filename>")
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    @app.route('/metrics')
    def metrics():
        return metrics_endpoint()

    return app


if __name__ == '__main__':
    app = create_app()
    logger.info(f"Server running on http://{Config.FLASK_HOST}:{Config.FLASK_PORT}")

    app.run(
        host=Config.FLASK_HOST,
        port=Config.FLASK_PORT,
        debug=Config.FLASK_DEBUG
    )
