"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./vaccination.db"
    db_echo: bool = False

    jwt_secret_key: str = "your_jwt_secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    bcrypt_rounds: int = 10

    default_admin_username: str = "admin"
    default_admin_password: str = "admin123"

    default_page_size: int = 10
    max_page_size: int = 100

    public_base_url: str = "http://localhost:5173"
    public_path_template: str = "/pasien/{slug}"

    cors_origins: str = "*"
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma separated CORS origins."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def public_url_for(self, slug: str) -> str:
        """Public viewer URL for a record slug."""
        return self.public_base_url.rstrip("/") + self.public_path_template.format(slug=slug)
