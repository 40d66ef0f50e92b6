from __future__ import annotations

from pathlib import Path
from typing import List, Optional
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Meeting Minutes"

    # Completion provider
    groq_api_key: Optional[str] = None
    groq_api_url: str = "https://api.groq.com/openai/v1/completions"
    groq_model: str = "groq-lite"
    summary_max_tokens: int = 800

    # Outbound mail
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_secure: bool = False
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    mail_from: Optional[str] = None
    mail_subject: str = "Meeting Summary"

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    static_dir: Optional[Path] = None
    max_upload_bytes: int = 5 * 1024 * 1024
    max_json_bytes: int = 2 * 1024 * 1024

    # Local state
    data_dir: Path = Field(default_factory=lambda: Path.cwd() / "data")
    database_path: Optional[Path] = None
    logs_dir: Optional[Path] = None

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @model_validator(mode="after")
    def _derive_paths(self) -> "Settings":
        # Paths default to locations under data_dir
        if self.database_path is None:
            self.database_path = self.data_dir / "minutes.sqlite"
        if self.logs_dir is None:
            self.logs_dir = self.data_dir / "logs"
        return self

    @property
    def sender(self) -> Optional[str]:
        return self.mail_from or self.smtp_user

    def ensure_dirs(self) -> None:
        for d in [self.data_dir, self.logs_dir, self.database_path.parent]:
            d.mkdir(parents=True, exist_ok=True)
