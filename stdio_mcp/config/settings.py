from functools import lru_cache
from importlib import metadata
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def _package_version() -> str:
    try:
        return metadata.version("stdio-mcp-server")
    except metadata.PackageNotFoundError:
        return "0.1.0"


class AppSettings(BaseSettings):
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    # "json" for structured records, "text" for human-readable lines
    LOG_FORMAT: Literal["json", "text"] = "json"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class ServerSettings(BaseSettings):
    SERVER_NAME: str = "stdio-mcp-server"
    SERVER_VERSION: str = _package_version()

    # Schema validation of tools/call arguments before dispatch
    VALIDATE_TOOL_ARGUMENTS: bool = True

    # Advertised capabilities (tools are always advertised)
    ENABLE_RESOURCES: bool = False
    ENABLE_PROMPTS: bool = False

    MAX_LINE_BYTES: int = 16 * 1024 * 1024

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class Settings(BaseSettings):
    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()


@lru_cache()
def get_settings() -> Settings:
    # We instantiate the nested settings explicitly to ensure .env variables are loaded
    return Settings(app=AppSettings(), server=ServerSettings())


settings = get_settings()
