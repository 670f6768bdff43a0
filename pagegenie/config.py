from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # OpenRouter (OpenAI-compatible gateway)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    default_model: str = "google/gemini-2.5-flash"
    openrouter_model: str = ""  # optional override of default_model
    llm_max_tokens: int = 4096
    llm_timeout_seconds: float = 60.0

    # Search provider
    search_provider: str = "brave"  # brave | tavily
    brave_api_key: str = ""
    tavily_api_key: str = ""
    search_fallback_to_tavily: bool = True
    search_timeout_seconds: float = 20.0
    search_results_per_attempt: int = 10
    search_default_language: str = "en"

    # Source finding
    sources_default_limit: int = 5
    sources_max_limit: int = 20

    # Page fetch / extraction
    fetch_timeout_seconds: float = 12.0
    fetch_user_agent: str = "PageGenieBot/1.0 (+https://example.com)"
    extractor_max_page_chars: int = 20000

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
