from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "cocktails.json"


class Settings(BaseSettings):
    app_name: str = "mixology"
    env: str = "local"
    log_level: str = "INFO"

    catalog_path: Path = DEFAULT_CATALOG_PATH

    # Providers are tried in order groq -> claude -> openai; a provider without a key is skipped.
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama3-70b-8192"
    claude_api_key: str = ""
    claude_base_url: str = "https://api.anthropic.com/v1"
    claude_model: str = "claude-3-haiku-20240307"
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"
    openai_vision_model: str = "gpt-4o"

    llm_temperature: float = 0.7
    llm_max_tokens: int = 1000
    llm_timeout_s: int = 30

    # Advisory only: the extractor never enforces it.
    suggestion_count: int = 3

    # strict | standard | brand_aware
    extraction_profile: str = "standard"
    # Overrides the profile's token limit for detected-ingredient lines when set.
    vocabulary_max_tokens: int | None = None
    # Appended to the profile's brand exemplars (JSON list in env, e.g. '["Aperol"]').
    vocabulary_brand_exemplars: list[str] = []

    class Config:
        env_file = ".env"


settings = Settings()
