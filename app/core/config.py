"""Configuration settings for the portfolio contact API.

This module manages environment variables and application settings.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings.

    Attributes:
        API_V1_STR: API version path prefix
        PROJECT_NAME: Name of the project
        DEBUG: Debug mode flag
        LOG_LEVEL: Root logging level name
        CORS_ORIGINS: Origins allowed to call the API
        SMTP_HOST: Outbound mail server host
        CONTACT_EMAIL: Address that receives contact form notifications
        MAIL_SEND_TIMEOUT: Seconds to wait on the mail server before giving up
        RATE_LIMIT_WINDOW_SECONDS: Length of a rate limit window
        RATE_LIMIT_MAX_REQUESTS: Submissions admitted per client per window
        RATE_LIMIT_MAX_CLIENTS: Client records kept before the oldest is evicted
    """
    def __init__(self):
        self.API_V1_STR = "/api/v1"
        self.PROJECT_NAME = os.getenv("PROJECT_NAME", "Portfolio Contact API")
        self.DEBUG = os.getenv("DEBUG", "False").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

        origins = os.getenv("CORS_ORIGINS", "*")
        self.CORS_ORIGINS = [origin.strip() for origin in origins.split(",") if origin.strip()]

        # SMTP Settings
        self.SMTP_HOST = os.getenv("SMTP_HOST")
        self.SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
        self.SMTP_SECURE = os.getenv("SMTP_SECURE", "false").lower() == "true"
        self.SMTP_USER = os.getenv("SMTP_USER")
        self.SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")

        # Email Settings
        self.CONTACT_EMAIL = os.getenv("CONTACT_EMAIL")
        self.EMAIL_SENDER_NAME = os.getenv("EMAIL_SENDER_NAME", "Portfolio Contact")
        self.MAIL_SEND_TIMEOUT = float(os.getenv("MAIL_SEND_TIMEOUT", "15"))

        # Rate Limit Settings
        self.RATE_LIMIT_WINDOW_SECONDS = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
        self.RATE_LIMIT_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "3"))
        self.RATE_LIMIT_MAX_CLIENTS = int(os.getenv("RATE_LIMIT_MAX_CLIENTS", "10000"))


settings = Settings()
