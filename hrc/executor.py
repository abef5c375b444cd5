"""hrc executor - client construction, dispatch, sending, cookie persistence."""

from pathlib import Path

import requests
import urllib3

from hrc.core import Options
from hrc.errors import (
    ClientConstructionError,
    JarWriteError,
    ResponseReadError,
    TransportError,
    UnsupportedMethod,
)
from hrc.output import Output, dump_body, dump_headers, dump_request, dump_status
from hrc.request import BODY_STEPS, ENRICHERS, PendingRequest, build_request, run_steps

METHOD_FLOWS = {
    "GET": ENRICHERS,
    "POST": ENRICHERS + BODY_STEPS,
    "PUT": ENRICHERS + BODY_STEPS,
}


def make_client(insecure: bool = False, ca_bundle: str | None = None) -> requests.Session:
    """Build the transport session.

    insecure accepts invalid and self-signed certificates; ca_bundle points
    verification at a custom CA file instead of the default store.
    """
    try:
        session = requests.Session()
        if insecure:
            session.verify = False
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        elif ca_bundle:
            if not Path(ca_bundle).exists():
                raise FileNotFoundError(f"CA bundle not found: {ca_bundle}")
            session.verify = ca_bundle
    except (OSError, ValueError) as e:
        raise ClientConstructionError("Cannot create HTTP client") from e
    return session


def process(opts: Options, out: Output | None = None, client: requests.Session | None = None):
    """Run one invocation: enrich, build, send, persist cookies, print."""
    out = out or Output()
    steps = METHOD_FLOWS.get(opts.method)
    if steps is None:
        raise UnsupportedMethod(opts.method)

    if client is None:
        client = make_client(opts.insecure, opts.ca_bundle)

    pending = PendingRequest(opts.method, opts.url)
    try:
        pending = run_steps(pending, opts, steps)
        prepared = build_request(client, pending)
        send(prepared, client, opts, out)
    finally:
        pending.close()


def send(
    prepared: requests.PreparedRequest,
    client: requests.Session,
    opts: Options,
    out: Output,
) -> requests.Response:
    if opts.verbose > 1:
        dump_request(out, prepared)

    try:
        resp = client.send(prepared, stream=True)
    except requests.RequestException as e:
        raise TransportError("Failed to send request") from e

    try:
        if opts.verbose > 0:
            dump_status(out, resp)
            dump_headers(out, resp.headers, is_req=False)

        if opts.cookie_jar:
            try:
                save_cookie(getattr(resp.raw, "headers", None) or resp.headers, opts.cookie_jar)
            except JarWriteError as e:
                raise JarWriteError("Failed to save cookies", opts.cookie_jar) from e

        try:
            text = resp.text
        except requests.RequestException as e:
            raise ResponseReadError("Failed to extract response body") from e
        dump_body(out, text, opts.verbose)
    finally:
        resp.close()
    return resp


def save_cookie(headers, cookie_jar: str) -> bool:
    """Overwrite the jar with the Set-Cookie value, if the response has one.

    With several Set-Cookie headers only the first is kept; urllib3 headers
    expose them separately through getlist().
    """
    getlist = getattr(headers, "getlist", None)
    if getlist is not None:
        values = getlist("Set-Cookie")
        cookie = values[0] if values else None
    else:
        cookie = headers.get("Set-Cookie")
    if cookie is None:
        return False
    try:
        Path(cookie_jar).write_text(cookie)
    except OSError as e:
        raise JarWriteError(f"Cannot write to cookie jar, `{cookie_jar}`", cookie_jar) from e
    return True
