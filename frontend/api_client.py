"""HTTP client used by the UI to talk to the movie API"""
import logging

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    pass


class MovieApiClient:

    def __init__(self, base_url, timeout=10, upload_prefix='/uploads', session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.upload_prefix = upload_prefix
        self.session = session or requests.Session()

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ApiError(f"Could not reach movie API: {e}") from e

        if not response.ok:
            logger.error(f"{method} {url} returned {response.status_code}")
            try:
                message = response.json().get('error')
            except ValueError:
                message = None
            raise ApiError(message or f"Movie API returned {response.status_code}")

        return response

    @staticmethod
    def _multipart(fields, image):
        data = {
            'name': fields.get('name', ''),
            'type': fields.get('type', ''),
            'rating': fields.get('rating', ''),
            'imageUrlLink': fields.get('image_link', ''),
        }

        files = None
        if image is not None and image.filename:
            files = {'image': (image.filename, image.stream, image.mimetype)}

        return data, files

    def fetch_movies(self):
        return self._request('GET', '/api/movies').json()

    def create_movie(self, fields, image=None):
        data, files = self._multipart(fields, image)
        return self._request('POST', '/api/movies', data=data, files=files).json()

    def update_movie(self, movie, fields, image=None):
        data, files = self._multipart(fields, image)
        # Lets the API keep the stored image when nothing new was supplied
        data['currentImageUrl'] = movie.get('image_url') or ''

        return self._request('PUT', f"/api/movies/{movie['id']}", data=data, files=files).json()

    def delete_movie(self, movie_id):
        return self._request('DELETE', f"/api/movies/{movie_id}").json()

    def image_src(self, movie):
        image_url = movie.get('image_url')
        if not image_url:
            return None

        if image_url.startswith(self.upload_prefix):
            return f"{self.base_url}{image_url}"

        return image_url
