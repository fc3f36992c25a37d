from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_TALK_DATA_PATH = PROJECT_ROOT / "src" / "app" / "seed-talk" / "talk-data.ts"


class Settings(BaseSettings):
    app_name: str = "Kites Talk Sync API"
    api_prefix: str = "/api"
    frontend_origin: str = "http://localhost:3000"

    talk_data_path: Path = DEFAULT_TALK_DATA_PATH
    talk_array_start: str = "export const TALK_KITES: KiteDef[] = ["
    talk_array_end: str = "];"
    talk_sync_enabled: bool = True

    sync_server_url: str = "http://localhost:8000"
    sync_timeout_seconds: int = 30

    log_level: str = "INFO"
    log_preview_chars: int = 180

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
