import logging

from quote_pricing.config import Settings, get_settings, reset_settings
from quote_pricing.utils.logger import setup_logging


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("LOG_LEVEL", "API_TITLE", "CORS_ORIGINS", "OUTPUT_DIR", "PROJECT_ROOT"):
        monkeypatch.delenv(f"QUOTE_PRICING_{name}", raising=False)

    settings = Settings.load(project_root=tmp_path)
    assert settings.log_level == "INFO"
    assert settings.allowed_origins == ["*"]
    assert settings.output_dir == tmp_path / "outputs"


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("QUOTE_PRICING_LOG_LEVEL", "debug")
    monkeypatch.setenv("QUOTE_PRICING_CORS_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("QUOTE_PRICING_OUTPUT_DIR", str(tmp_path / "out"))

    settings = Settings.load(project_root=tmp_path)
    assert settings.log_level == "DEBUG"
    assert settings.allowed_origins == ["https://a.example", "https://b.example"]
    assert settings.output_dir == tmp_path / "out"


def test_dotenv_file_is_read(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("QUOTE_PRICING_API_TITLE", raising=False)
    (tmp_path / ".env").write_text("QUOTE_PRICING_API_TITLE=Staging Pricing\n", encoding="utf-8")

    assert Settings.load(project_root=tmp_path).api_title == "Staging Pricing"


def test_get_settings_is_cached(monkeypatch):
    reset_settings()
    first = get_settings()
    assert get_settings() is first
    reset_settings()
    assert get_settings() is not first


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    setup_logging("WARNING")
    count = len(root.handlers)
    setup_logging("DEBUG")
    assert len(root.handlers) == count
    assert root.level == logging.DEBUG
