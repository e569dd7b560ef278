"""
Configuration management for HR Buddy.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # LLM
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    # Email (SendGrid)
    sendgrid_api_key: str = ""
    sendgrid_from_email: str = "hr@myhrbuddy.com"

    # MCP servers
    clickup_mcp_url: str = ""
    clickup_mcp_token: str = ""
    neon_mcp_url: str = ""
    neon_mcp_token: str = ""

    # Database
    database_url: str = ""

    # Auth
    session_secret: str = "change-me"
    admin_email: str = "admin@myhrbuddy.com"
    admin_password: str = ""
    zapier_webhook_secret: str = ""

    # Storage
    upload_dir: str = "uploads"

    # HTTP
    cors_origins: str = "http://localhost:3000"
    request_timeout: float = 30.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars


settings = Settings()
