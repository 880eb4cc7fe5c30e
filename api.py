import logging
import math

import psycopg2
from flask import Blueprint, current_app, jsonify, request

from database.uploads import remove_upload, resolve_image_url, save_upload
from metrics import MOVIE_WRITES, UPLOAD_COUNT, track_request

logger = logging.getLogger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')

INFRASTRUCTURE_ERRORS = (psycopg2.Error, OSError)


class ValidationError(Exception):
    pass


def get_db():
    return current_app.extensions['movies_db']


def parse_rating(raw):
    if raw is None or raw == '':
        return None

    try:
        rating = float(raw)
    except ValueError:
        raise ValidationError('Rating must be a number')

    if not math.isfinite(rating):
        raise ValidationError('Rating must be a number')

    return rating


def read_movie_form():
    name = request.form.get('name')
    if not name:
        raise ValidationError('Movie name is required')

    return {
        'name': name,
        'type': request.form.get('type') or None,
        'rating': parse_rating(request.form.get('rating')),
        'link': request.form.get('imageUrlLink'),
    }


def store_image():
    path = save_upload(
        request.files.get('image'),
        current_app.config['UPLOAD_FOLDER'],
        current_app.config['UPLOAD_URL_PREFIX']
    )
    if path:
        UPLOAD_COUNT.inc()
    return path


def discard_image(image_url):
    if not current_app.config['UPLOAD_DELETE_REPLACED']:
        return

    try:
        remove_upload(
            image_url,
            current_app.config['UPLOAD_FOLDER'],
            current_app.config['UPLOAD_URL_PREFIX']
        )
    except OSError as e:
        logger.warning(f"Could not remove {image_url}: {e}")


@api.route('/health')
@track_request
def health():
    return jsonify({'status': 'ok', 'message': 'Backend is working!'})


@api.route('/test-db')
@track_request
def test_db():
    try:
        rows = get_db().ping()
        return jsonify({'success': True, 'rows': rows})
    except INFRASTRUCTURE_ERRORS as e:
        logger.error(f"DB error: {e}", exc_info=True)
        return jsonify({'success': False, 'error': 'Database connection failed'}), 500


@api.route('/movies', methods=['GET'])
@track_request
def list_movies():
    try:
        return jsonify(get_db().list_movies())
    except INFRASTRUCTURE_ERRORS as e:
        logger.error(f"Error fetching movies: {e}", exc_info=True)
        return jsonify({'error': 'Failed to fetch movies'}), 500


@api.route('/movies', methods=['POST'])
@track_request
def create_movie():
    try:
        fields = read_movie_form()
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400

    db = get_db()

    try:
        image_url = resolve_image_url(store_image(), fields['link'])

        movie_id = db.insert_movie(fields['name'], fields['type'], fields['rating'], image_url)
        movie = db.get_movie(movie_id)
    except INFRASTRUCTURE_ERRORS as e:
        logger.error(f"Error adding movie: {e}", exc_info=True)
        return jsonify({'error': 'Failed to add movie'}), 500

    MOVIE_WRITES.labels(operation='create').inc()
    logger.info(f"Created movie {movie_id}: {fields['name']!r}")

    return jsonify(movie), 201


@api.route('/movies/<int:movie_id>', methods=['PUT'])
@track_request
def update_movie(movie_id):
    try:
        fields = read_movie_form()
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400

    db = get_db()

    try:
        image_url = resolve_image_url(
            store_image(),
            fields['link'],
            current=request.form.get('currentImageUrl'),
            allow_current=True
        )

        previous = db.get_movie(movie_id) if current_app.config['UPLOAD_DELETE_REPLACED'] else None

        db.update_movie(movie_id, fields['name'], fields['type'], fields['rating'], image_url)
        movie = db.get_movie(movie_id)
    except INFRASTRUCTURE_ERRORS as e:
        logger.error(f"Error updating movie: {e}", exc_info=True)
        return jsonify({'error': 'Failed to update movie'}), 500

    if previous and previous['image_url'] != image_url:
        discard_image(previous['image_url'])

    MOVIE_WRITES.labels(operation='update').inc()

    # Unknown ids update nothing and answer with null
    return jsonify(movie)


@api.route('/movies/<int:movie_id>', methods=['DELETE'])
@track_request
def delete_movie(movie_id):
    db = get_db()

    try:
        previous = db.get_movie(movie_id) if current_app.config['UPLOAD_DELETE_REPLACED'] else None
        db.delete_movie(movie_id)
    except INFRASTRUCTURE_ERRORS as e:
        logger.error(f"Error deleting movie: {e}", exc_info=True)
        return jsonify({'error': 'Failed to delete movie'}), 500

    if previous:
        discard_image(previous['image_url'])

    MOVIE_WRITES.labels(operation='delete').inc()

    return jsonify({'message': 'Movie deleted successfully'})
