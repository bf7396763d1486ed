import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Base configuration class with common settings."""
    # Estimation settings
    HOURS_PER_DAY = float(os.environ.get("HOURS_PER_DAY", "8"))
    ESTIMATION_STRATEGY = os.environ.get("ESTIMATION_STRATEGY", "throughput")
    TRACKED_CATEGORY = os.environ.get("TRACKED_CATEGORY", "JG Customs")
    SCALE_BY_QUANTITY = _env_bool("SCALE_BY_QUANTITY")
    WRITE_WORKERS = int(os.environ.get("WRITE_WORKERS", "1"))

    # Airtable configuration
    AIRTABLE_API_KEY = os.environ.get("AIRTABLE_API_KEY")
    AIRTABLE_BASE_ID = os.environ.get("AIRTABLE_BASE_ID")
    AIRTABLE_API_URL = os.environ.get("AIRTABLE_API_URL", "https://api.airtable.com/v0")
    AIRTABLE_TIMEOUT = float(os.environ.get("AIRTABLE_TIMEOUT", "30"))
    JOBS_TABLE = os.environ.get("JOBS_TABLE", "Jobs")
    JOBS_VIEW = os.environ.get("JOBS_VIEW", "Sorted Grid")
    WORKSTATIONS_TABLE = os.environ.get("WORKSTATIONS_TABLE", "Workstations")
    CONFIGURATION_TABLE = os.environ.get("CONFIGURATION_TABLE", "Configuration")

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE = os.environ.get("LOG_FILE")  # None logs to stdout only


class LocalConfig(Config):
    """Configuration for local development."""
    ENV = "local"
    DEBUG = True


class SandboxConfig(Config):
    """Configuration for sandbox/staging environment."""
    ENV = "sandbox"
    DEBUG = False


class ProductionConfig(Config):
    """Configuration for production environment."""
    ENV = "production"
    DEBUG = False


def get_config():
    """Get the appropriate configuration class based on environment variable.

    Environment is determined by the ENVIRONMENT variable:
    - 'local' or 'development' -> LocalConfig
    - 'sandbox' or 'staging' -> SandboxConfig
    - 'production' or 'prod' -> ProductionConfig

    Defaults to LocalConfig if not set.
    """
    env = os.environ.get("ENVIRONMENT", "local").lower()

    if env in ["local", "development", "dev"]:
        return LocalConfig
    elif env in ["sandbox", "staging", "stage"]:
        return SandboxConfig
    elif env in ["production", "prod"]:
        return ProductionConfig
    else:
        # Default to local for safety
        return LocalConfig
