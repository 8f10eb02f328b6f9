"""
Transport doubles for ConsoleClient tests.

RecordingAdapter answers from a queue and remembers every request that
reached the wire; DjangoTestAdapter routes requests into django.test.Client
so the client can be exercised against the real views.
"""
import json
from http import HTTPStatus
from urllib.parse import urlsplit

import requests
from requests.adapters import BaseAdapter

from console_client.client import ConsoleClient
from console_client.config import ClientConfig
from console_client.session import SessionContext
from core.access_control.actor import Actor

BASE_URL = 'http://testserver'


def build_response(request, status_code, content=b''):
    response = requests.Response()
    response.status_code = status_code
    response._content = content
    response.encoding = 'utf-8'
    response.headers['Content-Type'] = 'application/json'
    response.url = request.url
    response.request = request
    try:
        response.reason = HTTPStatus(status_code).phrase
    except ValueError:
        response.reason = ''
    return response


def envelope(data=None, message='', status='success'):
    return {'status': status, 'message': message, 'data': data}


class RecordingAdapter(BaseAdapter):
    """Answers queued (status, body) pairs; 200 with an empty envelope when the queue is empty."""

    def __init__(self, *responses):
        super().__init__()
        self.responses = list(responses)
        self.requests = []

    def queue(self, status_code, body=None):
        self.responses.append((status_code, body))

    def send(self, request, **kwargs):
        self.requests.append(request)
        if self.responses:
            status_code, body = self.responses.pop(0)
        else:
            status_code, body = 200, envelope()
        if isinstance(body, Exception):
            raise body
        content = b'' if body is None else json.dumps(body).encode('utf-8')
        return build_response(request, status_code, content)

    def close(self):
        pass


class DjangoTestAdapter(BaseAdapter):
    """Serves requests from the Django test client instead of the network."""

    def __init__(self, django_client):
        super().__init__()
        self.django_client = django_client
        self.requests = []

    def send(self, request, **kwargs):
        self.requests.append(request)
        url = urlsplit(request.url)
        path = url.path + (f'?{url.query}' if url.query else '')
        headers = {
            name: request.headers[name]
            for name in ('Authorization', 'Accept', 'Accept-Language')
            if name in request.headers
        }
        body = request.body or b''
        if isinstance(body, str):
            body = body.encode('utf-8')
        result = self.django_client.generic(
            request.method,
            path,
            data=body,
            content_type=request.headers.get('Content-Type', 'application/json'),
            headers=headers,
        )
        return build_response(request, result.status_code, result.content)

    def close(self):
        pass


def make_actor(permissions=(), **payload):
    payload.setdefault('id', 1)
    payload.setdefault('email', 'user@test.com')
    payload['permissions'] = list(permissions)
    return Actor.from_payload(payload)


def make_client(adapter, session=None, base_url=BASE_URL, locale='en'):
    """ConsoleClient whose HTTP session is served by ``adapter``."""
    http = requests.Session()
    http.mount(base_url, adapter)
    return ConsoleClient(ClientConfig(base_url=base_url, locale=locale), session or SessionContext(), http)
