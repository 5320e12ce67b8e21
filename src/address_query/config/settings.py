import yaml
from pathlib import Path

CONFIG_PATH = Path(__file__).parent / "search.yaml"

# Loading search and logging settings from YAML file
def load_config(file_path):
    with open(file_path, "r") as file:
        return yaml.safe_load(file)

CONFIG = load_config(CONFIG_PATH)

# Limits for result sets, in rows
SEARCH_CONFIG = CONFIG["search"]

# Columns every query word is matched against, in order
TARGET_FIELDS = tuple(CONFIG["predicate"]["target_fields"])

# Per-column points for the ranking expression
RELEVANCE_WEIGHTS = dict(CONFIG["relevance_weights"])

logging_config = CONFIG["logging"]

# Environment variable holding the PostgreSQL DSN
DSN_ENV_VAR = "DATABASE_URL"
