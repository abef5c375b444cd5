"""hrc core - options, config loading, spec parsing."""

import os
import re
from pathlib import Path

import yaml
from dotenv import dotenv_values

GLOBAL_DIR = Path.home() / ".hrc"
GLOBAL_CONFIG = GLOBAL_DIR / "config.yaml"

CWD_CONFIG_CANDIDATES = [
    ".hrc.yaml",
    ".hrc.yml",
    "hrc.yaml",
    "hrc.yml",
]

METHODS = ("GET", "POST", "PUT", "DELETE")


class Options:
    """Everything one invocation needs, assembled by the CLI.

    The pipeline only reads from it.
    """

    def __init__(
        self,
        url: str,
        method: str = "GET",
        verbose: int = 0,
        basic: str | None = None,
        bearer: str | None = None,
        headers: list[str] | None = None,
        file: str | None = None,
        insecure: bool = False,
        cookie_jar: str | None = None,
        form: list[str] | None = None,
        cookies: list[str] | None = None,
        ca_bundle: str | None = None,
    ):
        self.url = url
        self.method = method.upper()
        self.verbose = verbose
        self.basic = basic
        self.bearer = bearer
        self.headers = list(headers) if headers else None
        self.file = file
        self.insecure = insecure
        self.cookie_jar = cookie_jar
        self.form = list(form) if form else None
        self.cookies = list(cookies) if cookies else None
        self.ca_bundle = ca_bundle

    def __repr__(self):
        return f"Options(method={self.method!r}, url={self.url!r}, verbose={self.verbose})"


def normalize_url(url: str) -> str:
    """Prefix http:// when no scheme is given."""
    if "://" not in url:
        return f"http://{url}"
    return url


# ── Spec parsing ─────────────────────────────────────────────────────────


def split_credentials(credential: str) -> tuple[str, str] | None:
    """Split 'user:pass' on the first colon. None when there is no colon."""
    if ":" not in credential:
        return None
    user, password = credential.split(":", 1)
    return user, password


def parse_header_specs(specs: list[str]) -> list[tuple[str, str]]:
    """Parse 'Name: Value' specs into (name, value) pairs, in order.

    Splits on the first colon only; specs without a colon are dropped.
    """
    pairs = []
    for spec in specs:
        if ":" not in spec:
            continue
        k, v = spec.split(":", 1)
        pairs.append((k.strip(), v.strip()))
    return pairs


def parse_form_fields(form_specs: list[str]) -> dict[str, str]:
    """Parse KEY=VALUE specs into an ordered dict. Specs without '=' are skipped."""
    data: dict[str, str] = {}
    for spec in form_specs:
        if "=" not in spec:
            continue
        key, value = spec.split("=", 1)
        data[key] = value
    return data


# ── Config ───────────────────────────────────────────────────────────────


def resolve_path(
    candidates: list[Path],
    default: Path | None = None,
) -> Path | None:
    """Return the first existing path from candidates, else default."""
    for p in candidates:
        if p.exists():
            return p.resolve()
    return default


def resolve_config_path(config_file: str | None) -> Path | None:
    """Find the config file to use.

    Resolution order:
      1. Explicit --config flag (hard — no fallthrough if missing)
      2. .hrc.yaml (variants) in CWD
      3. ~/.hrc/config.yaml
    """
    if config_file:
        return resolve_path([Path(config_file)])
    return resolve_path([Path(c) for c in CWD_CONFIG_CANDIDATES] + [GLOBAL_CONFIG])


def load_config(config_path: str | Path | None) -> dict:
    """Load YAML config file. Returns an empty defaults section if not found.

    Stores '_config_dir' so relative paths (env_file, cookie_jar, ca_bundle)
    can be resolved against the config file's directory.
    """
    if config_path is None:
        return {"defaults": {}, "_config_dir": None}
    path = Path(config_path)
    if not path.exists():
        return {"defaults": {}, "_config_dir": None}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return {
        "defaults": data.get("defaults") or {},
        "_config_dir": path.resolve().parent,
    }


def load_env(env_file: str | None, base_dir: str | Path = ".") -> dict[str, str]:
    """Load .env file and merge with os.environ.

    .env values take precedence over os.environ.
    """
    env = dict(os.environ)
    if env_file:
        dotenv_path = Path(base_dir) / env_file
        if dotenv_path.exists():
            dotenv_vars = dotenv_values(str(dotenv_path))
            env.update({k: v for k, v in dotenv_vars.items() if v is not None})
    return env


def resolve_value(value: str | None, env: dict[str, str]) -> str | None:
    """Resolve $VAR and ${VAR} references in a string value.

    Unknown variables are left as written.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value

    def _replace(m: re.Match) -> str:
        var_name = m.group(1) or m.group(2)
        return env.get(var_name, os.environ.get(var_name, m.group(0)))

    return re.sub(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)", _replace, value)


def _config_headers(raw) -> list[str]:
    """Config headers may be a mapping or a list of 'Name: Value' specs."""
    if not raw:
        return []
    if isinstance(raw, dict):
        return [f"{k}: {v}" for k, v in raw.items()]
    return [str(h) for h in raw]


def _relative_to(path: str | None, base: Path | None) -> str | None:
    if not path or base is None:
        return path
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    return str(p)


def build_options(config: dict, env: dict[str, str], **cli) -> Options:
    """Merge config defaults under CLI values and return Options.

    CLI values win when set; config headers are applied before CLI headers
    so a CLI header overrides a default of the same name.
    """
    defaults = config.get("defaults", {})
    config_dir = config.get("_config_dir")

    def _default(key):
        return resolve_value(defaults.get(key), env)

    headers = [resolve_value(h, env) for h in _config_headers(defaults.get("headers"))]
    headers.extend(cli.get("headers") or ())

    return Options(
        url=normalize_url(cli["url"]),
        method=cli.get("method") or "GET",
        verbose=cli.get("verbose") or 0,
        basic=cli.get("basic") or _default("basic"),
        bearer=cli.get("bearer") or _default("bearer"),
        headers=headers or None,
        file=cli.get("file"),
        insecure=bool(cli.get("insecure") or defaults.get("insecure")),
        cookie_jar=cli.get("cookie_jar") or _relative_to(_default("cookie_jar"), config_dir),
        form=cli.get("form"),
        cookies=cli.get("cookies"),
        ca_bundle=_relative_to(_default("ca_bundle"), config_dir),
    )
