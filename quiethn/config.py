from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    port: int = 3000
    num_stories: int = 30

    # Cached stories are served for this long; the background refresher
    # runs at half this interval.
    cache_ttl_seconds: float = 10.0

    hn_base_url: str = "https://hacker-news.firebaseio.com/v0"
    request_timeout: float = 30.0
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "QUIETHN_"}


settings = Settings()
