import os

from api.backend import BackendAPI

DEFAULT_USER_ID = "default"

USE_DATABASE = os.getenv("USE_DATABASE", "false").lower() in {"1", "true", "yes"}

# Task store is swapped for PostgresTaskStore at startup when USE_DATABASE is on.
backend = BackendAPI()
