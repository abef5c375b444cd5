"""Tests for option parsing helpers and config resolution."""

import yaml

from hrc import core
from hrc.core import (
    Options,
    build_options,
    normalize_url,
    parse_form_fields,
    parse_header_specs,
    split_credentials,
)

# ── Spec parsing ─────────────────────────────────────────────────────────


class TestSplitCredentials:
    def test_user_and_password(self):
        assert split_credentials("admin:secret") == ("admin", "secret")

    def test_no_colon_is_ignored(self):
        assert split_credentials("admin") is None

    def test_splits_on_first_colon_only(self):
        assert split_credentials("admin:pa:ss") == ("admin", "pa:ss")

    def test_empty_password(self):
        assert split_credentials("admin:") == ("admin", "")


class TestParseHeaderSpecs:
    def test_basic(self):
        assert parse_header_specs(["Accept: text/plain"]) == [("Accept", "text/plain")]

    def test_entries_without_colon_dropped(self):
        assert parse_header_specs(["garbage", "X-A:1"]) == [("X-A", "1")]

    def test_multiple_colons_split_on_first(self):
        assert parse_header_specs(["Referer: http://x.test:8080/a"]) == [
            ("Referer", "http://x.test:8080/a"),
        ]

    def test_order_preserved(self):
        pairs = parse_header_specs(["B:2", "A:1", "B:3"])
        assert pairs == [("B", "2"), ("A", "1"), ("B", "3")]


class TestParseFormFields:
    def test_text_fields_in_order(self):
        result = parse_form_fields(["b=2", "a=1"])
        assert list(result.items()) == [("b", "2"), ("a", "1")]

    def test_value_with_equals(self):
        assert parse_form_fields(["url=http://x.test?a=1"]) == {"url": "http://x.test?a=1"}

    def test_no_equals_ignored(self):
        assert parse_form_fields(["invalid_spec"]) == {}

    def test_empty_value(self):
        assert parse_form_fields(["key="]) == {"key": ""}


class TestNormalizeUrl:
    def test_adds_scheme(self):
        assert normalize_url("example.test/api") == "http://example.test/api"

    def test_keeps_https(self):
        assert normalize_url("https://example.test") == "https://example.test"

    def test_host_starting_with_http(self):
        assert normalize_url("httpbin.org/get") == "http://httpbin.org/get"

    def test_host_with_port(self):
        assert normalize_url("localhost:8080/a") == "http://localhost:8080/a"


class TestOptions:
    def test_method_uppercased(self):
        assert Options(url="http://x.test", method="post").method == "POST"

    def test_empty_lists_become_none(self):
        opts = Options(url="http://x.test", headers=[], form=(), cookies=[])
        assert opts.headers is None
        assert opts.form is None
        assert opts.cookies is None


# ── Config resolution ────────────────────────────────────────────────────


def _write_config(path, defaults):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump({"defaults": defaults}))


class TestResolveConfigPath:
    def test_explicit_flag_takes_priority(self, tmp_project, global_hrc_dir):
        explicit = tmp_project / "custom" / "my.yaml"
        _write_config(explicit, {})
        _write_config(tmp_project / ".hrc.yaml", {})
        _write_config(global_hrc_dir / "config.yaml", {})
        assert core.resolve_config_path(str(explicit)) == explicit.resolve()

    def test_explicit_flag_nonexistent_returns_none(self, tmp_project):
        assert core.resolve_config_path("/nonexistent/config.yaml") is None

    def test_cwd_config_found(self, tmp_project, global_hrc_dir):
        _write_config(tmp_project / ".hrc.yaml", {})
        _write_config(global_hrc_dir / "config.yaml", {})
        assert core.resolve_config_path(None) == (tmp_project / ".hrc.yaml").resolve()

    def test_falls_back_to_global(self, tmp_project, global_hrc_dir):
        _write_config(global_hrc_dir / "config.yaml", {})
        assert core.resolve_config_path(None) == (global_hrc_dir / "config.yaml").resolve()

    def test_nothing_found(self, tmp_project):
        assert core.resolve_config_path(None) is None


class TestLoadConfig:
    def test_missing_returns_empty_defaults(self):
        assert core.load_config(None) == {"defaults": {}, "_config_dir": None}

    def test_reads_defaults(self, tmp_project):
        _write_config(tmp_project / ".hrc.yaml", {"bearer": "tok"})
        config = core.load_config(tmp_project / ".hrc.yaml")
        assert config["defaults"] == {"bearer": "tok"}
        assert config["_config_dir"] == tmp_project.resolve()

    def test_empty_file(self, tmp_project):
        (tmp_project / ".hrc.yaml").write_text("")
        assert core.load_config(tmp_project / ".hrc.yaml")["defaults"] == {}


class TestEnvResolution:
    def test_dotenv_overrides_environ(self, tmp_project, monkeypatch):
        monkeypatch.setenv("API_TOKEN", "from-environ")
        (tmp_project / ".env").write_text("API_TOKEN=from-dotenv\n")
        env = core.load_env(".env", tmp_project)
        assert env["API_TOKEN"] == "from-dotenv"

    def test_resolve_value_forms(self):
        env = {"A": "1", "B": "2"}
        assert core.resolve_value("$A-${B}", env) == "1-2"

    def test_unknown_variable_left_alone(self, monkeypatch):
        monkeypatch.delenv("HRC_NOPE", raising=False)
        assert core.resolve_value("$HRC_NOPE", {}) == "$HRC_NOPE"


class TestBuildOptions:
    def test_cli_values_win(self):
        config = {"defaults": {"bearer": "cfg", "insecure": False}, "_config_dir": None}
        opts = build_options(config, {}, url="x.test", bearer="cli", insecure=True)
        assert opts.bearer == "cli"
        assert opts.insecure is True
        assert opts.url == "http://x.test"

    def test_config_fills_gaps(self):
        config = {"defaults": {"bearer": "$TOKEN", "insecure": True}, "_config_dir": None}
        opts = build_options(config, {"TOKEN": "t0k"}, url="http://x.test")
        assert opts.bearer == "t0k"
        assert opts.insecure is True

    def test_config_headers_come_before_cli_headers(self):
        config = {"defaults": {"headers": {"Accept": "text/plain"}}, "_config_dir": None}
        opts = build_options(config, {}, url="http://x.test", headers=("Accept: */*",))
        assert opts.headers == ["Accept: text/plain", "Accept: */*"]

    def test_paths_relative_to_config_dir(self, tmp_path):
        config = {
            "defaults": {"cookie_jar": "jar.txt", "ca_bundle": "ca.pem"},
            "_config_dir": tmp_path,
        }
        opts = build_options(config, {}, url="http://x.test")
        assert opts.cookie_jar == str(tmp_path / "jar.txt")
        assert opts.ca_bundle == str(tmp_path / "ca.pem")
