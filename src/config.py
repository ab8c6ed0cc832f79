from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    gateway_api_key: str = ""
    gateway_base_url: str = "https://ai.gateway.lovable.dev/v1"
    gateway_model: str = "google/gemini-2.5-flash"
    gateway_timeout_seconds: float = 30.0

    screenshot_temperature: float = 0.3
    screenshot_max_tokens: int = 2000

    phrase_dictionary_path: str = ""
    reason_max_phrases: int = 3


settings = Settings()
