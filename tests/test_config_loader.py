import pytest
from pydantic import ValidationError

from treolan_proxy.utils.config_loader import DEFAULT_BASE_URL, load_proxy_config


def test_defaults_without_file_or_env(tmp_path):
    cfg = load_proxy_config(tmp_path / "missing.yml", environ={})

    assert cfg.upstream.base_url == DEFAULT_BASE_URL
    assert cfg.upstream.auth_paths == ["/auth/token"]
    assert cfg.upstream.timeout_seconds == 20.0
    assert cfg.catalog.vendor_id == 746
    assert cfg.server.port == 3000
    assert cfg.upstream.missing_credentials() == ["TREOLAN_LOGIN", "TREOLAN_PASSWORD"]


def test_env_overrides_yaml(tmp_path):
    path = tmp_path / "proxy.yml"
    path.write_text(
        "upstream:\n"
        "  base_url: https://yaml.example/api/v1/\n"
        "  login: yaml-login\n"
        "catalog:\n"
        "  vendor_id: 1\n",
        encoding="utf-8",
    )

    cfg = load_proxy_config(
        path,
        environ={
            "TREOLAN_PASSWORD": "env-secret",
            "M3_VENDOR_ID": "0",
            "TREOLAN_AUTH_PATHS": "/auth/token, /Auth/Login",
            "CORS_ORIGINS": "https://a.example,https://b.example",
            "PORT": "8080",
            "LOG_LEVEL": "debug",
        },
    )

    assert cfg.upstream.base_url == "https://yaml.example/api/v1"
    assert cfg.upstream.login == "yaml-login"
    assert cfg.upstream.password == "env-secret"
    assert cfg.upstream.missing_credentials() == []
    assert cfg.upstream.auth_paths == ["/auth/token", "/Auth/Login"]
    assert cfg.catalog.vendor_id == 0
    assert cfg.server.cors_origins == ["https://a.example", "https://b.example"]
    assert cfg.server.port == 8080
    assert cfg.server.log_level == "DEBUG"


def test_config_path_from_env(tmp_path):
    path = tmp_path / "custom.yml"
    path.write_text("catalog:\n  brand_name: Other Brand\n", encoding="utf-8")

    cfg = load_proxy_config(environ={"PROXY_CONFIG_PATH": str(path)})

    assert cfg.catalog.brand_name == "Other Brand"


def test_invalid_values_are_rejected(tmp_path):
    with pytest.raises(ValidationError):
        load_proxy_config(tmp_path / "missing.yml", environ={"M3_VENDOR_ID": "not-a-number"})

    with pytest.raises(ValidationError):
        load_proxy_config(tmp_path / "missing.yml", environ={"TREOLAN_AUTH_PATHS": " , "})


def test_repository_config_file_loads():
    cfg = load_proxy_config(environ={})

    assert cfg.catalog.brand_name == "M3 Mobile"
    assert "https://m3-mobile.ru" in cfg.server.cors_origins
