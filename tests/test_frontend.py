import io

import pytest

from app import create_app
from frontend.api_client import ApiError, MovieApiClient


class FakeClient(MovieApiClient):
    """Records calls instead of issuing HTTP requests"""

    def __init__(self, movies=None):
        super().__init__('http://api.test')
        self.movies = movies or []
        self.calls = []
        self.fail = False

    def _maybe_fail(self):
        if self.fail:
            raise ApiError('Failed')

    def fetch_movies(self):
        self.calls.append(('fetch',))
        return list(self.movies)

    def create_movie(self, fields, image=None):
        self._maybe_fail()
        self.calls.append(('create', fields, image.filename if image else None))
        return {}

    def update_movie(self, movie, fields, image=None):
        self._maybe_fail()
        self.calls.append(('update', movie['id'], fields))
        return {}

    def delete_movie(self, movie_id):
        self._maybe_fail()
        self.calls.append(('delete', movie_id))
        return {}


@pytest.fixture
def movie_client():
    return FakeClient([
        {'id': 2, 'name': 'Heat', 'type': '1995', 'rating': 8.3, 'image_url': '/uploads/heat.jpg'},
        {'id': 1, 'name': 'Alien', 'type': None, 'rating': None, 'image_url': None},
    ])


@pytest.fixture
def ui_client(app_config, fake_db, movie_client):
    return create_app(app_config, database=fake_db, api_client=movie_client).test_client()


def test_listing_renders_cards(ui_client):
    html = ui_client.get('/').get_data(as_text=True)

    assert 'List of movies' in html
    assert 'Name: Heat' in html
    assert 'http://api.test/uploads/heat.jpg' in html
    assert 'IMAGE' in html
    assert "confirm('Are you sure you want to delete this movie?')" in html


def test_empty_listing(ui_client, movie_client):
    movie_client.movies = []

    assert 'No movies found.' in ui_client.get('/').get_data(as_text=True)


def test_add_form(ui_client):
    html = ui_client.get('/add').get_data(as_text=True)

    assert 'Add movies' in html
    assert 'Type:' in html
    assert 'enctype="multipart/form-data"' in html


def test_add_submits_and_returns_to_list(ui_client, movie_client):
    response = ui_client.post('/add', data={
        'name': 'Heat',
        'type': '1995',
        'rating': '8.3',
        'image_link': '',
        'image': (io.BytesIO(b'img'), 'heat.jpg')
    }, content_type='multipart/form-data')

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/')
    assert movie_client.calls[0][0] == 'create'
    assert movie_client.calls[0][2] == 'heat.jpg'


def test_add_requires_name_before_request(ui_client, movie_client):
    response = ui_client.post('/add', data={'name': '   '})

    assert 'Movie name is required' in response.get_data(as_text=True)
    assert movie_client.calls == []


def test_add_failure_keeps_form_open(ui_client, movie_client):
    movie_client.fail = True

    response = ui_client.post('/add', data={'name': 'Heat', 'type': '1995'})
    html = response.get_data(as_text=True)

    assert response.status_code == 200
    assert 'Failed to add movie' in html
    assert 'value="1995"' in html


def test_edit_form_is_prefilled(ui_client):
    html = ui_client.get('/edit/2').get_data(as_text=True)

    assert 'value="Heat"' in html
    assert 'value="8.3"' in html
    assert 'value="/uploads/heat.jpg"' in html
    assert 'Update movie' in html
    assert 'Released Date:' in html


def test_edit_unknown_movie(ui_client):
    assert ui_client.get('/edit/99').status_code == 404


def test_edit_submits(ui_client, movie_client):
    response = ui_client.post('/edit/2', data={'name': 'Heat (1995)', 'rating': '9'})

    assert response.status_code == 302
    assert ('update', 2, {'name': 'Heat (1995)', 'type': '', 'rating': '9', 'image_link': ''}) in movie_client.calls


def test_edit_failure_keeps_form_open(ui_client, movie_client):
    movie_client.fail = True

    html = ui_client.post('/edit/2', data={'name': 'Heat'}).get_data(as_text=True)

    assert 'Failed to update movie' in html
    assert 'Update movie' in html


def test_delete(ui_client, movie_client):
    response = ui_client.post('/delete/1')

    assert response.status_code == 302
    assert ('delete', 1) in movie_client.calls


def test_delete_failure_shows_alert(ui_client, movie_client):
    movie_client.fail = True

    html = ui_client.post('/delete/1').get_data(as_text=True)

    assert 'Failed to delete movie' in html
    assert 'List of movies' in html
