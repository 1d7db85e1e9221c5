import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    COSMOS_DB_ENDPOINT: str = ""
    COSMOS_DB_KEY: str = ""
    COSMOS_DB_DATABASE: str = "EmployeeManagement"
    COSMOS_DB_EMPLOYEES_CONTAINER: str = "employeedetails"
    COSMOS_DB_USERS_CONTAINER: str = "users"

    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"

    CORS_ORIGINS: str = "http://localhost:3000"

    # Used only when no users container is configured.
    ADMIN_EMAIL: str = ""
    ADMIN_PASSWORD_HASH: str = ""

    API_BASE_URL: str = "http://localhost:5000"
    PAGE_SIZE: int = 10

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
