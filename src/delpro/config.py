from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    cors_origins: list[str] = []
    # Super admin account created on first startup if missing
    admin_email: str
    admin_password: str
    admin_name: str = "Super Admin"
    org_tag: str = "Delpro"  # First segment of every docket number, e.g. Delpro/Report/2025/001
    short_code_prefix: str = "DPL"  # Primary short code namespace, DPL001..DPL999
    short_code_attempts: int = 20  # Random overflow prefixes tried before giving up
    # Build metadata injected during Docker build via environment variables
    git_commit_hash: str = "unknown"
    git_commit_date: str = "unknown"
    build_time: str = "unknown"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "DELPRO_",
        "extra": "ignore",
    }
