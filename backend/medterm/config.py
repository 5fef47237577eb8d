from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".medterm" / "data"
    sqlite_filename: str = "medterm.db"
    baskets_dirname: str = "baskets"
    logs_dirname: str = "logs"
    log_filename: str = "medterm.log"
    log_level: str = "INFO"

    jwt_secret: str = "your-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7
    token_cookie_name: str = "token"

    basket_key: str = "flashcard-basket"
    transition_delay_seconds: float = 1.5

    # Bootstrap account created on first start
    admin_username: str = "admin"
    admin_email: str = "admin@medicalapp.com"
    admin_password: str = "admin123"

    model_config = {"env_prefix": "MEDTERM_"}


settings = Settings()
