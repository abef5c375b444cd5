"""hrc request - the request-in-progress and the steps that shape it."""

import base64
import sys
from pathlib import Path
from typing import Any

import requests
from requests.structures import CaseInsensitiveDict

from hrc.core import Options, parse_form_fields, parse_header_specs, split_credentials
from hrc.errors import FileOpenError, JarReadError, RequestBuildError, StdinReadError


class PendingRequest:
    """Method, URL, headers and body accumulated before preparation."""

    def __init__(self, method: str, url: str):
        self.method = method
        self.url = url
        self.headers: CaseInsensitiveDict = CaseInsensitiveDict()
        self.body: Any = None  # file object, bytes, or form dict
        self.open_files: list = []

    def set_header(self, name: str, value: str) -> None:
        # Drop the old key first so iteration order follows the last write
        self.headers.pop(name, None)
        self.headers[name] = value

    def close(self) -> None:
        for f in self.open_files:
            f.close()
        self.open_files.clear()


# ── Header/Auth enrichment ───────────────────────────────────────────────


def apply_basic_auth(req: PendingRequest, opts: Options) -> PendingRequest:
    if opts.basic:
        creds = split_credentials(opts.basic)
        if creds:
            token = base64.b64encode(f"{creds[0]}:{creds[1]}".encode()).decode()
            req.set_header("Authorization", f"Basic {token}")
    return req


def apply_bearer_auth(req: PendingRequest, opts: Options) -> PendingRequest:
    if opts.bearer:
        req.set_header("Authorization", f"Bearer {opts.bearer}")
    return req


def apply_default_content_type(req: PendingRequest, opts: Options) -> PendingRequest:
    if opts.method in ("POST", "PUT"):
        req.set_header("content-type", "application/json")
    return req


def apply_custom_headers(req: PendingRequest, opts: Options) -> PendingRequest:
    for name, value in parse_header_specs(opts.headers or []):
        req.set_header(name, value)
    return req


def read_cookie_jar(path: str) -> str:
    """Return the jar contents, or '' when the jar does not exist yet."""
    try:
        return Path(path).read_text().strip()
    except FileNotFoundError:
        return ""
    except OSError as e:
        raise JarReadError(path) from e


def build_cookie_header(cookies: list[str] | None, cookie_jar: str | None) -> str:
    """Each inline cookie followed by ';', then the jar contents."""
    value = "".join(f"{c};" for c in cookies or [])
    if cookie_jar:
        value += read_cookie_jar(cookie_jar)
    return value


def apply_cookies(req: PendingRequest, opts: Options) -> PendingRequest:
    value = build_cookie_header(opts.cookies, opts.cookie_jar)
    if value:
        req.set_header("Cookie", value)
    return req


ENRICHERS = [
    apply_basic_auth,
    apply_bearer_auth,
    apply_default_content_type,
    apply_custom_headers,
    apply_cookies,
]


# ── Body resolution (POST/PUT) ───────────────────────────────────────────


def attach_file_or_stdin(req: PendingRequest, opts: Options) -> PendingRequest:
    """Body from --file, else from piped stdin, else none."""
    if opts.file:
        try:
            f = open(opts.file, "rb")  # noqa: SIM115 - closed after sending
        except OSError as e:
            raise FileOpenError(opts.file) from e
        req.open_files.append(f)
        req.body = f
    elif not sys.stdin.isatty():
        try:
            req.body = sys.stdin.read().encode("utf-8")
        except (OSError, UnicodeError) as e:
            raise StdinReadError("Cannot read from stdin") from e
    return req


def attach_form(req: PendingRequest, opts: Options) -> PendingRequest:
    """Form fields replace any body attached before them.

    The JSON content-type default is left alone.
    """
    if opts.form:
        req.body = parse_form_fields(opts.form)
    return req


BODY_STEPS = [
    attach_file_or_stdin,
    attach_form,
]


def run_steps(req: PendingRequest, opts: Options, steps) -> PendingRequest:
    for step in steps:
        req = step(req, opts)
    return req


def _keep_headers(r):
    return r


def build_request(session: requests.Session, req: PendingRequest) -> requests.PreparedRequest:
    """Freeze the pending request into a PreparedRequest.

    Header values must be Latin-1; http.client refuses anything else at send
    time. An explicit Authorization header is never replaced by .netrc.
    """
    try:
        for name, value in req.headers.items():
            name.encode("latin-1")
            value.encode("latin-1")
        return session.prepare_request(
            requests.Request(
                method=req.method,
                url=req.url,
                headers=dict(req.headers.items()),
                data=req.body,
                auth=_keep_headers if "Authorization" in req.headers else None,
            ),
        )
    except (requests.RequestException, ValueError) as e:
        raise RequestBuildError("Failed to create request") from e
