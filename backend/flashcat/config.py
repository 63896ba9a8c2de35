from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".flashcat" / "data"
    sqlite_filename: str = "flashcat.db"
    media_dirname: str = "media"
    public_base_url: str = "http://127.0.0.1:8000"
    session_card_limit: int = 20
    daily_goal: int = 20
    stale_after_hours: int = 24
    tts_max_chars: int = 500
    log_level: str = "warning"

    model_config = {"env_prefix": "FLASHCAT_"}

    @property
    def media_dir(self) -> Path:
        return self.data_dir / self.media_dirname


settings = Settings()
