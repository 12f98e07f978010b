from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "SmartFix"

    # Server
    PORT: int = 8000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    BOOKINGS_TABLE: str = "bookings"
    SERVICES_TABLE: str = "services"

    # Local booking cache (empty = in-memory only)
    CACHE_DIR: str = "data/cache"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
