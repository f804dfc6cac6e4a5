from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / "UniSearch"
    api_prefix: str = "/api/v1"

    max_query_length: int = 500
    default_page_size: int = 20
    max_page_size: int = 50
    # Providers are always read from offset 0 so fusion paginates the real
    # combined set. Each source contributes at least candidate_pool_size hits.
    candidate_pool_size: int = 100
    max_candidates_per_source: int = 1000
    performance_target_ms: float = 500.0
    # Threads dedicated to provider queries, shared by concurrent searches.
    provider_workers: int = 24
    # Raw provider scores are not comparable across content types.
    normalize_relevance_scores: bool = False

    history_limit: int = 10
    popular_window_days: int = 7
    popular_limit: int = 10
    history_retention_days: int = 90
    query_log_retention_days: int = 365

    autocomplete_min_length: int = 2
    autocomplete_limit: int = 10
    autocomplete_per_source: int = 3
    similarity_threshold: float = 0.3

    @property
    def db_path(self) -> Path:
        return self.data_dir / "search.sqlite"

    model_config = {"env_prefix": "SEARCH_"}


settings = Settings()
