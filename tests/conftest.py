"""Shared fixtures for hrc tests."""

import io
import os
import sys

import pytest
import requests
from click.testing import CliRunner
from requests.structures import CaseInsensitiveDict

from hrc import core, executor


class FakeSession(requests.Session):
    """A real Session whose send() never touches the network."""

    def __init__(self, response=None, error=None):
        super().__init__()
        self.response = response
        self.error = error
        self.sent: list[requests.PreparedRequest] = []

    def send(self, request, **kwargs):
        self.sent.append(request)
        if self.error is not None:
            raise self.error
        return self.response


class TtyStdin(io.StringIO):
    def isatty(self):
        return True


def make_response(status_code=200, body="", headers=None):
    """Factory for canned requests.Response objects."""
    r = requests.Response()
    r.status_code = status_code
    r._content = body.encode("utf-8") if isinstance(body, str) else body
    r._content_consumed = True
    r.headers = CaseInsensitiveDict(headers or {})
    r.encoding = "utf-8"
    r.url = "http://example.test/"
    return r


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def fake_client(monkeypatch):
    """Route executor.make_client to a FakeSession answering 200 {}."""
    session = FakeSession(response=make_response(body="{}"))
    monkeypatch.setattr(executor, "make_client", lambda *a, **kw: session)
    return session


@pytest.fixture(autouse=True)
def interactive_stdin(monkeypatch):
    """Behave as if stdin is a terminal unless a test pipes something in."""
    monkeypatch.setattr(sys, "stdin", TtyStdin())


@pytest.fixture
def global_hrc_dir(tmp_path, monkeypatch):
    """Override the global ~/.hrc directory to a temp location."""
    fake_global = tmp_path / "fake_home" / ".hrc"
    fake_global.mkdir(parents=True)
    monkeypatch.setattr(core, "GLOBAL_DIR", fake_global)
    monkeypatch.setattr(core, "GLOBAL_CONFIG", fake_global / "config.yaml")
    return fake_global


@pytest.fixture
def tmp_project(tmp_path, global_hrc_dir):
    """Create a temporary project directory and cd into it."""
    project = tmp_path / "project"
    project.mkdir()
    original = os.getcwd()
    os.chdir(project)
    yield project
    os.chdir(original)
