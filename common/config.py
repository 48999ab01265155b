from pydantic_settings import BaseSettings

MAX_FILE_SIZE = 200 * 1024 * 1024


class ServerSettings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"
    workers: int = 1
    upload_dir: str = "uploads"
    max_upload_bytes: int = MAX_FILE_SIZE
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ]
    log_level: str = "INFO"

    model_config = {"env_prefix": "SERVER_", "env_file": ".env", "extra": "ignore"}


class GeminiSettings(BaseSettings):
    api_key: str = ""
    model_name: str = "gemini-2.0-flash-001"
    base_url: str = "https://generativelanguage.googleapis.com"
    timeout_s: float = 300.0

    model_config = {"env_prefix": "GEMINI_", "env_file": ".env", "extra": "ignore"}

    @property
    def configured(self) -> bool:
        return bool(self.api_key)
