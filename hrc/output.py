"""hrc output - request/response dumps, body formatting, error rendering."""

import json
import sys

import click
import requests

_HTTP_VERSIONS = {9: "HTTP/0.9", 10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2.0"}


class Output:
    """Line writer for stdout.

    A closed pipe on the reading side (``hrc URL | head``) is not an error:
    the first BrokenPipeError silences every later write.
    """

    def __init__(self, stream=None):
        self.stream = stream
        self.closed = False

    def line(self, text: str = "") -> None:
        if self.closed:
            return
        try:
            click.echo(text, file=self.stream or sys.stdout)
        except BrokenPipeError:
            self.closed = True


# ── Request / response metadata ──────────────────────────────────────────


def dump_headers(out: Output, headers, is_req: bool) -> None:
    prefix = ">" if is_req else "<"
    for k, v in headers.items():
        out.line(f"{prefix} {k}: {v}")


def dump_request(out: Output, prepared: requests.PreparedRequest) -> None:
    out.line(f"> {prepared.method} {prepared.url}")
    dump_headers(out, prepared.headers, is_req=True)
    out.line()


def http_version(response: requests.Response) -> str:
    version = getattr(response.raw, "version", None)
    return _HTTP_VERSIONS.get(version, "HTTP/1.1")


def dump_status(out: Output, response: requests.Response) -> None:
    out.line(f"< {http_version(response)} {response.status_code}")


def format_body(text: str) -> str:
    """Pretty-print JSON bodies with 2-space indent; anything else verbatim."""
    try:
        parsed = json.loads(text)
    except ValueError:
        return text
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def dump_body(out: Output, text: str, verbose: int) -> None:
    if verbose > 0:
        out.line()
    out.line(format_body(text))


# ── Errors ───────────────────────────────────────────────────────────────


def _next_cause(exc: BaseException) -> BaseException | None:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__context__ is not None and not exc.__suppress_context__:
        return exc.__context__
    # requests wraps urllib3 errors as the first positional argument
    if exc.args and isinstance(exc.args[0], BaseException):
        return exc.args[0]
    return None


def error_chain(exc: BaseException) -> list[BaseException]:
    """The error followed by every wrapped cause, outermost first."""
    chain = [exc]
    seen = {id(exc)}
    cause = _next_cause(exc)
    while cause is not None and id(cause) not in seen:
        chain.append(cause)
        seen.add(id(cause))
        cause = _next_cause(cause)
    return chain


def root_cause(exc: BaseException) -> BaseException:
    return error_chain(exc)[-1]


def _message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def format_error(exc: BaseException, verbose: int) -> str:
    """Root cause only when quiet, the whole chain when verbose."""
    if verbose <= 0:
        return _message(root_cause(exc))

    chain = error_chain(exc)
    lines = [f"ERROR: {_message(chain[0])}"]
    if len(chain) > 1:
        lines.append("")
        lines.append("Caused by:")
        for i, cause in enumerate(chain[1:]):
            lines.append(f"    {i}: {_message(cause)}")
    return "\n".join(lines)
