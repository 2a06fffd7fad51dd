from job_harvest.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.user_agent == "RemoteHireHub Job Aggregator"
    assert settings.remoteok_url == "https://remoteok.com/api"
    assert settings.api_keys == []


def test_env_override(monkeypatch):
    monkeypatch.setenv("JOB_HARVEST_HTTP_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("JOB_HARVEST_SCRAPE_API_KEYS", "cron-secret, admin-secret")
    settings = Settings(_env_file=None)
    assert settings.http_timeout_seconds == 5.0
    assert settings.api_keys == ["cron-secret", "admin-secret"]


def test_bearer_authorization():
    settings = Settings(_env_file=None, scrape_api_keys="cron-secret,admin-secret")
    assert settings.is_authorized("Bearer cron-secret")
    assert settings.is_authorized("bearer admin-secret")
    assert not settings.is_authorized("Bearer nope")
    assert not settings.is_authorized("cron-secret")
    assert not settings.is_authorized(None)


def test_no_keys_configured_rejects_everything():
    assert not Settings(_env_file=None).is_authorized("Bearer ")
