from pathlib import Path

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Repository root; the service reads its .env from here wherever it is launched.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Export .env so the Google auth library sees GOOGLE_APPLICATION_CREDENTIALS.
load_dotenv(_PROJECT_ROOT / ".env")

DEFAULT_CHAT_API_ENDPOINT = "chat.googleapis.com"
DEFAULT_CHAT_SCOPE = "https://www.googleapis.com/auth/chat.bot"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="allow",  # Allow extra environment variables
    )

    app_name: str = "chat-relay"
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("ENV", "ENVIRONMENT"),
    )
    log_level: str = Field(default="INFO", json_schema_extra={"env": "LOG_LEVEL"})
    port: int = Field(default=8080, json_schema_extra={"env": "PORT"})

    # Google Chat
    google_chat_enabled: bool = Field(
        default=True, json_schema_extra={"env": "GOOGLE_CHAT_ENABLED"}
    )
    chat_api_endpoint: str = Field(
        default=DEFAULT_CHAT_API_ENDPOINT,
        json_schema_extra={"env": "CHAT_API_ENDPOINT"},
    )
    chat_scope: str = Field(
        default=DEFAULT_CHAT_SCOPE, json_schema_extra={"env": "CHAT_SCOPE"}
    )
    # Abort startup when the chat client cannot be built; otherwise run degraded
    # and drop every reply.
    chat_client_fail_fast: bool = Field(
        default=True, json_schema_extra={"env": "CHAT_CLIENT_FAIL_FAST"}
    )
    log_outgoing_messages: bool = Field(
        default=False, json_schema_extra={"env": "LOG_OUTGOING_MESSAGES"}
    )

    @property
    def is_production(self) -> bool:
        """Check if the current environment is production."""
        return self.environment.lower() == "production"

    @property
    def is_test(self) -> bool:
        """Check if the current environment is test."""
        return self.environment.lower() == "test"


def get_settings() -> Settings:
    """Get application settings with required environment variables."""
    return Settings()
