from pathlib import Path

# Repo-root conventional directories/files (overrideable via detection.yaml)
CONFIG_DIR = Path("configs")
PROVIDERS_DIR = CONFIG_DIR / "providers"
DETECTION_FILE = CONFIG_DIR / "detection.yaml"

PROMPTS_DIR = Path("prompts")
DATA_DIR = Path("data")
TAXONOMY_FILE = DATA_DIR / "generic_equipments.csv"
