from pathlib import Path

from app.settings import Settings, choose_env_file


def test_prismic_host_is_taken_from_api_url():
    s = Settings(PRISMIC_API_URL="https://my-repo.cdn.prismic.io/api/v2")
    assert s.prismic_host == "my-repo.cdn.prismic.io"


def test_defaults_match_page_generation_policy():
    s = Settings()
    assert s.POSTS_PAGE_SIZE == 1
    assert s.PREBUILT_POSTS == 2
    assert s.HOME_REVALIDATE_SECONDS == 3600
    assert s.POST_REVALIDATE_SECONDS == 1800


def test_choose_env_file_prefers_env_local(monkeypatch):
    monkeypatch.setattr(Path, "exists", lambda self: str(self) == ".env.local")
    assert choose_env_file() == ".env.local"


def test_choose_env_file_falls_back(monkeypatch):
    monkeypatch.setattr(Path, "exists", lambda self: False)
    assert choose_env_file() == ".env"
