from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str
    DATABASE_ECHO: bool = False
    RUN_MIGRATIONS: bool = True
    LOG_LEVEL: str = "INFO"

    # Identity recorded in the audit trail when a request names nobody
    DEFAULT_REQUESTER: str = "system@prism.com"

    # OpenAI-compatible chat completion endpoint used by the assistant
    LLM_API_URL: str = "https://api.aimlapi.com/v1/chat/completions"
    LLM_API_KEY: str = ""
    LLM_MODEL: str = "gpt-4o"
    LLM_MAX_TOKENS: int = 1024
    LLM_TEMPERATURE: float = 0.9
    LLM_TIMEOUT: float = 30.0

    # This tells Pydantic to read from the .env file
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create a single instance of the settings to use everywhere
settings = Settings()
