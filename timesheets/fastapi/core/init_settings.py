import os

from timesheets.fastapi.core.config import get_settings

global_settings = get_settings(os.getenv("ENV_MODE", "dev"))
