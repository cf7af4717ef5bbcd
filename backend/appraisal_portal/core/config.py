import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    COSMOS_DB_ENDPOINT: str = ""
    COSMOS_DB_KEY: str = ""
    COSMOS_DB_DATABASE: str = "appraisal-db"
    COSMOS_DB_EMPLOYEES_CONTAINER: str = "employees"
    COSMOS_DB_TEAMS_CONTAINER: str = "teams"
    COSMOS_DB_PROFILES_CONTAINER: str = "employee_profiles"
    COSMOS_DB_PERIODS_CONTAINER: str = "review_periods"
    COSMOS_DB_ASSIGNMENTS_CONTAINER: str = "appraisal_assignments"
    COSMOS_DB_TEMPLATES_CONTAINER: str = "templates"

    AZURE_AD_TENANT_ID: str = ""
    AZURE_AD_CLIENT_ID: str = ""
    ADMIN_ROLE: str = "admin"

    ORG_CHART_MAX_DEPTH: int = 20

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()
