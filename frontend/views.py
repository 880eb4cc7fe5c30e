"""Server-rendered catalog UI: list, add form and edit form"""
import logging
from dataclasses import dataclass, field

from flask import Blueprint, abort, current_app, redirect, render_template, request, url_for

from frontend.api_client import ApiError

logger = logging.getLogger(__name__)

ui = Blueprint('ui', __name__, template_folder='templates')


@dataclass
class Listing:
    movies: list
    error: str = None


@dataclass
class Adding:
    form: dict = field(default_factory=dict)
    error: str = None


@dataclass
class Editing:
    movie: dict
    form: dict = field(default_factory=dict)
    error: str = None


def get_client():
    return current_app.extensions['movie_client']


def empty_form():
    return {'name': '', 'type': '', 'rating': '', 'image_link': ''}


def form_from_movie(movie):
    rating = movie.get('rating')
    return {
        'name': movie.get('name') or '',
        'type': movie.get('type') or '',
        'rating': '' if rating is None else str(rating),
        'image_link': movie.get('image_url') or '',
    }


def form_from_request():
    return {key: request.form.get(key, '') for key in empty_form()}


def render_view(state):
    if isinstance(state, Listing):
        return render_template(
            'movies.html',
            movies=state.movies,
            image_src=get_client().image_src,
            error=state.error
        )

    if isinstance(state, Adding):
        return render_template(
            'movie_form.html',
            title='Add movies',
            type_label='Type:',
            submit_label='Add',
            action=url_for('ui.add_movie'),
            form=state.form,
            error=state.error
        )

    if isinstance(state, Editing):
        return render_template(
            'movie_form.html',
            title='Update movie',
            type_label='Released Date:',
            submit_label='Save',
            action=url_for('ui.edit_movie', movie_id=state.movie['id']),
            form=state.form,
            error=state.error
        )

    raise TypeError(f"Unknown view state: {state!r}")


def load_movies():
    try:
        return get_client().fetch_movies(), None
    except ApiError as e:
        logger.error(f"Error fetching movies: {e}")
        return [], 'Failed to load movies'


def find_movie(movie_id):
    movies, error = load_movies()
    if error:
        return None, error

    for movie in movies:
        if movie['id'] == movie_id:
            return movie, None

    abort(404)


@ui.route('/')
def index():
    movies, error = load_movies()
    return render_view(Listing(movies, error))


@ui.route('/add', methods=['GET', 'POST'])
def add_movie():
    if request.method == 'GET':
        return render_view(Adding(empty_form()))

    form = form_from_request()
    if not form['name'].strip():
        return render_view(Adding(form, 'Movie name is required'))

    try:
        get_client().create_movie(form, request.files.get('image'))
    except ApiError as e:
        logger.error(f"Error adding movie: {e}")
        return render_view(Adding(form, 'Failed to add movie'))

    return redirect(url_for('ui.index'))


@ui.route('/edit/<int:movie_id>', methods=['GET', 'POST'])
def edit_movie(movie_id):
    movie, error = find_movie(movie_id)
    if error:
        return render_view(Listing([], error))

    if request.method == 'GET':
        return render_view(Editing(movie, form_from_movie(movie)))

    form = form_from_request()
    if not form['name'].strip():
        return render_view(Editing(movie, form, 'Movie name is required'))

    try:
        get_client().update_movie(movie, form, request.files.get('image'))
    except ApiError as e:
        logger.error(f"Error updating movie: {e}")
        return render_view(Editing(movie, form, 'Failed to update movie'))

    return redirect(url_for('ui.index'))


@ui.route('/delete/<int:movie_id>', methods=['POST'])
def delete_movie(movie_id):
    try:
        get_client().delete_movie(movie_id)
    except ApiError as e:
        logger.error(f"Error deleting movie: {e}")
        movies, error = load_movies()
        return render_view(Listing(movies, error or 'Failed to delete movie'))

    return redirect(url_for('ui.index'))
