from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    api_url: str = "http://127.0.0.1:3000"
    request_timeout: float = 10.0
    max_retries: int = 3

    model_config = {"env_prefix": "FLASHCARDS_", "env_file": ".env", "extra": "ignore"}


client_settings = ClientSettings()
