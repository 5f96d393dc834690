import pytest

from app.config import DEFAULT_FILES_ACCESS, load_settings
from app.exceptions import AuthConfigError


def test_batch_requires_token_and_deal_id():
    with pytest.raises(AuthConfigError, match="HUBSPOT_TOKEN"):
        load_settings("batch", {"DEAL_ID": "1"})
    with pytest.raises(AuthConfigError, match="DEAL_ID"):
        load_settings("batch", {"HUBSPOT_TOKEN": "t"})


def test_service_requires_api_key():
    with pytest.raises(AuthConfigError, match="ENDPOINT_API_KEY"):
        load_settings("service", {"HUBSPOT_TOKEN": "t"})
    settings = load_settings("service", {"HUBSPOT_TOKEN": "t", "ENDPOINT_API_KEY": "k"})
    assert settings.endpoint_api_key == "k"
    assert settings.deal_id is None


def test_defaults():
    settings = load_settings("batch", {"HUBSPOT_TOKEN": "t", "DEAL_ID": " 42 "})
    assert settings.deal_id == "42"
    assert settings.files_access == DEFAULT_FILES_ACCESS
    assert settings.files_folder_id is None
    assert settings.files_overwrite is False
    assert settings.pdf_engine == "chromium"
    assert settings.render_timeout_ms == 30_000
    assert settings.port == 3000
    assert settings.hubspot_base_url == "https://api.hubapi.com"


def test_optional_values():
    settings = load_settings(
        "batch",
        {
            "HUBSPOT_TOKEN": "t",
            "DEAL_ID": "1",
            "HUBSPOT_FILES_FOLDER_ID": "777",
            "HUBSPOT_FILES_FOLDER_PATH": "/deals",
            "HUBSPOT_FILES_OVERWRITE": "yes",
            "HUBSPOT_BASE_URL": "http://localhost:9000/",
            "PDF_ENGINE": "WeasyPrint",
            "PDF_RENDER_TIMEOUT_MS": "5000",
            "PORT": "8080",
        },
    )
    assert settings.files_folder_id == "777"
    assert settings.files_folder_path == "/deals"
    assert settings.files_overwrite is True
    assert settings.hubspot_base_url == "http://localhost:9000"
    assert settings.pdf_engine == "weasyprint"
    assert settings.render_timeout_ms == 5000
    assert settings.port == 8080


def test_invalid_values_are_config_errors():
    base = {"HUBSPOT_TOKEN": "t", "DEAL_ID": "1"}
    with pytest.raises(AuthConfigError, match="PORT"):
        load_settings("batch", {**base, "PORT": "eighty"})
    with pytest.raises(AuthConfigError, match="PDF_ENGINE"):
        load_settings("batch", {**base, "PDF_ENGINE": "wkhtmltopdf"})


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("HUBSPOT_TOKEN", "env-token")
    monkeypatch.setenv("DEAL_ID", "5")
    settings = load_settings("batch")
    assert settings.hubspot_token == "env-token"
    assert settings.deal_id == "5"
