"""hrc CLI - a curl-like HTTP client."""

import sys

import click

from hrc.core import METHODS

TOOL_HELP = """\
hrc — An HTTP client for the command line.

Sends one request to URL and prints the response body. JSON bodies are
pretty-printed; anything else is printed as-is.

\b
EXAMPLES
────────
  hrc httpbin.org/get
  hrc -m post example.test/api -H "X-Trace: 1" -f payload.json
  echo '{"name":"x"}' | hrc -m put example.test/api/1
  hrc -m post example.test/login -d user=me -d pass=secret -j cookies.txt

\b
VERBOSITY
─────────
  (none)   response body only
  -v       + status line and response headers
  -vv      + the outgoing request line and headers

\b
BODY (POST/PUT)
───────────────
  -f FILE wins over piped stdin. --form fields replace either of them.
  POST/PUT default to content-type: application/json; use -H to change it.

\b
COOKIES
───────
  -c sends a cookie as-is. -j FILE sends the jar contents and saves the
  response's Set-Cookie value back to FILE.

\b
CONFIG FILE (.hrc.yaml)
───────────────────────
  Config resolution order:
    1. --config flag (explicit path)
    2. .hrc.yaml / .hrc.yml / hrc.yaml / hrc.yml in CWD
    3. ~/.hrc/config.yaml (global)

  \b
  defaults:
    env_file: .env
    bearer: ${API_TOKEN}           # env var resolved at runtime
    headers:
      Accept: application/json
    cookie_jar: cookies.txt        # relative to the config file
    insecure: false
    ca_bundle: certs/ca.pem

  Command-line flags override config values.
"""


@click.command(
    help=TOOL_HELP,
    context_settings={"max_content_width": 88},
)
@click.argument("url")
@click.option(
    "-m",
    "--method",
    type=click.Choice(METHODS, case_sensitive=False),
    default="GET",
    show_default=True,
    help="HTTP method.",
)
@click.option("-v", "--verbose", count=True, help="Display more information. Repeatable.")
@click.option(
    "-u",
    "--user",
    "basic",
    default=None,
    help="Server username and password, as <username:password>.",
)
@click.option("-b", "--bearer", default=None, help="Bearer token.")
@click.option(
    "-H",
    "--header",
    "headers",
    multiple=True,
    help="Custom header as 'Name: Value'. Repeatable.",
)
@click.option("-f", "--file", default=None, help="Request body file (POST/PUT).")
@click.option(
    "-k",
    "--insecure",
    is_flag=True,
    default=False,
    help="Allow insecure connections when using SSL.",
)
@click.option(
    "-j",
    "--cookie-jar",
    default=None,
    help="Cookie jar file to send and save cookies.",
)
@click.option(
    "-d",
    "--form",
    multiple=True,
    help="Form field as KEY=VALUE. Repeatable.",
)
@click.option(
    "-c",
    "--cookie",
    "cookies",
    multiple=True,
    help="Send an individual cookie. Repeatable.",
)
@click.option(
    "--config",
    "config_file",
    default=None,
    help="Config file path. Default: .hrc.yaml in CWD, then ~/.hrc/config.yaml.",
)
def main(
    url,
    method,
    verbose,
    basic,
    bearer,
    headers,
    file,
    insecure,
    cookie_jar,
    form,
    cookies,
    config_file,
):
    """Send one HTTP request and print the response."""
    from hrc.core import build_options, load_config, load_env, resolve_config_path
    from hrc.errors import HrcError
    from hrc.executor import process
    from hrc.output import Output, format_error

    # --- Load config ---
    config_path = resolve_config_path(config_file)
    config = load_config(config_path)
    defaults = config.get("defaults", {})
    env = load_env(defaults.get("env_file"), config.get("_config_dir") or ".")

    opts = build_options(
        config,
        env,
        url=url,
        method=method,
        verbose=verbose,
        basic=basic,
        bearer=bearer,
        headers=headers,
        file=file,
        insecure=insecure,
        cookie_jar=cookie_jar,
        form=form,
        cookies=cookies,
    )

    try:
        process(opts, Output())
    except HrcError as e:
        click.echo(format_error(e, opts.verbose), err=True)
        sys.exit(1)
