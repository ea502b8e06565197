from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "Timesheet Tracker"
    APP_VERSION: str = "1.0.0"

    # Database URL (read from .env file)
    DATABASE_URL: str = ''

    # JWT Authentication settings
    JWT_SECRET_KEY: str = 'default-secret-key-change-in-production'
    JWT_ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Client URL for CORS
    CLIENT_URL: str = 'http://localhost:3000'
    ADDITIONAL_CORS_ORIGINS: str = ''

    # Logging
    LOG_LEVEL: str = 'INFO'

    # Account created on first start when no admin exists
    INITIAL_ADMIN_USERNAME: str = 'admin'
    INITIAL_ADMIN_PASSWORD: str = 'admin123456'
    INITIAL_ADMIN_NAME: str = 'Administrator'

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

    @property
    def DB_URL(self):
        if self.ENV_MODE == "dev":
            url = self.DEV_DB_URL
        elif self.DATABASE_URL:
            url = self.DATABASE_URL
        else:
            url = '{}://{}:{}@{}:{}/{}'.format(
                self.DB_ENGINE,
                self.DB_USERNAME,
                self.DB_PASS,
                self.DB_HOST,
                self.DB_PORT,
                self.DB_NAME
            )
        # PostgreSQL URLs without an explicit driver go through psycopg 3
        if url.startswith("postgresql://"):
            url = "postgresql+psycopg://" + url[len("postgresql://"):]
        return url

    @property
    def CORS_ORIGINS(self) -> list:
        origins = [
            self.CLIENT_URL,
            "http://localhost",
            "http://localhost:3000",
            "http://localhost:8000",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:8000"
        ]
        if self.ADDITIONAL_CORS_ORIGINS:
            origins.extend([origin.strip() for origin in self.ADDITIONAL_CORS_ORIGINS.split(",")])

        # Remove empty strings and duplicates
        return sorted(set(origin for origin in origins if origin))

class DevSettings(Settings):
    # Environment mode: 'dev' or 'prod'
    ENV_MODE: str = 'dev'

    # Database settings for development
    @property
    def DEV_DB_URL(self) -> str:
        # Use the configured DATABASE_URL if provided, otherwise a local SQLite file
        return self.DATABASE_URL if self.DATABASE_URL else "sqlite:///./timesheet.db"

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

class ProdSettings(Settings):
    # Environment mode: 'dev' or 'prod'
    ENV_MODE: str = 'prod'

    # Database settings for production
    DB_ENGINE: str = 'postgresql'
    DB_USERNAME: str = ''
    DB_PASS: str = ''
    DB_HOST: str = ''
    DB_PORT: str = ''
    DB_NAME: str = ''

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

def get_settings(env_mode: str = "dev"):
    if env_mode == "dev":
        return DevSettings()
    return ProdSettings()
