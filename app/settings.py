from pathlib import Path
from urllib.parse import urlparse

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Prismic
    PRISMIC_API_URL: str = "https://spacetraveling.cdn.prismic.io/api/v2"
    PRISMIC_ACCESS_TOKEN: str = ""
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Pages
    SITE_TITLE: str = "spacetraveling."
    POSTS_PAGE_SIZE: int = 1
    PREBUILT_POSTS: int = 2
    MAX_LOAD_MORE_PAGES: int = 20

    # Regeneration intervals
    HOME_REVALIDATE_SECONDS: int = 60 * 60
    POST_REVALIDATE_SECONDS: int = 60 * 30

    # Preview
    PREVIEW_COOKIE_NAME: str = "blog.preview-ref"

    # Comments (Utterances); empty disables the block
    UTTERANCES_REPO: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Our own API Key, guards on-demand revalidation
    BLOG_API_KEY: str = ""

    @property
    def prismic_host(self) -> str:
        return urlparse(self.PRISMIC_API_URL).netloc


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
