from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 60
    loan_period_days: int = 7
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:4200"]
    log_level: str = "INFO"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    kafka_bootstrap_servers: str | None = None
    kafka_inventory_topic: str = "inventory.updated"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
