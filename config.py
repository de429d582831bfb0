import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Catalog")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")

    # Storage settings: one JSON file per collection inside this directory
    data_dir: str = os.getenv("LIBRARY_DATA_DIR", "data")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()

    # CLI output mode: plain | json | rich
    default_output: str = os.getenv("LIB_CLI_OUTPUT", "plain").lower()


settings = Settings()
