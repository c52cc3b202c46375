from pathlib import Path

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

    # Posts collection
    POSTS_DIR: str = "_posts"
    POSTS_GLOB: str = "*.md"
    MAX_WORKERS: int = 4

    # Front matter: keys required on top of layout and title
    EXTRA_REQUIRED_FIELDS: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    # Our own API Key
    POSTMATTER_API_KEY: str = ""

    @property
    def extra_required_fields(self) -> tuple[str, ...]:
        names = (name.strip() for name in self.EXTRA_REQUIRED_FIELDS.split(","))
        return tuple(name for name in names if name)

    @property
    def posts_path(self) -> Path:
        return Path(self.POSTS_DIR)


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
