from pydantic_settings import BaseSettings
from typing import List, Optional
from urllib.parse import quote_plus

class Settings(BaseSettings):
    env: str = "local"
    log_level: str = "INFO"

    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "techpk"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # full URL wins over the postgres_* parts (sqlite for tests / local runs)
    sqlalchemy_database_url: Optional[str] = None

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    @property
    def database_url(self):
        if self.sqlalchemy_database_url:
            return self.sqlalchemy_database_url

        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
