from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Google Maps API configuration
    google_maps_api_key: str = ""
    routes_url: str = "https://routes.googleapis.com/directions/v2:computeRoutes"
    places_search_url: str = "https://places.googleapis.com/v1/places:searchText"
    places_autocomplete_url: str = (
        "https://places.googleapis.com/v1/places:autocomplete"
    )
    request_timeout_s: float = 10.0

    # API configuration
    api_version: str = "1.0"
    log_level: str = "INFO"

    # Trip planning limits
    max_optional_candidates: int = 40
    places_max_results: int = 20
    max_map_url_length: int = 2000
    autocomplete_min_chars: int = 3

    # IANA zone for the wall-clock inputs of a request, None = server local time
    timezone: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
