"""Application configuration using Pydantic Settings."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "ebookstore"
    app_version: str = "0.1.0"
    debug: bool = False

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Session tokens
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 7

    # Password hashing
    bcrypt_rounds: int = 12

    # Storage backend: "local" keeps everything in memory, "dynamodb" uses AWS
    storage_backend: Literal["local", "dynamodb"] = "local"
    seed_books_file: Optional[str] = None

    # AWS settings
    aws_region: str = "us-east-1"
    aws_endpoint_url: Optional[str] = None
    users_table_name: str = "Users"
    books_table_name: str = "Books"
    progress_table_name: str = "ReadingProgress"
    create_tables: bool = False

    # AWS credentials (optional, uses default credential chain if not set)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None

    # Book content
    enable_s3_content: bool = False
    content_bucket_name: str = "ebookstore-books"
    content_key_prefix: str = "books/"
    upload_dir: str = "uploads/books"
    http_content_timeout: float = 30.0

    # Catalog
    catalog_page_size: int = 12
    catalog_max_page_size: int = 100


# Create a singleton instance
settings = Settings()
