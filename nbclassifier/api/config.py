from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    artifacts_dir: Path = Field(default=Path("artifacts"), description="Path to training artifacts")
    host: str = Field(default="0.0.0.0", description="Bind address for the query server")
    port: int = Field(default=8000, ge=1, le=65535, description="Port for the query server")

    model_config = SettingsConfigDict(
        env_prefix="NBCLASSIFIER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


app_config = AppConfig()
