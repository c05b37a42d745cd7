# openran_tco/demo/seed_demo_data.py

from pathlib import Path

from openran_tco.config.loader import load_scenario
from openran_tco.core.engine import compute_scenario
from openran_tco.storage.db import DEFAULT_DB_PATH
from openran_tco.storage.repository import ComputedFactRepository, initialize_schema

SAMPLE_SCENARIO = Path(__file__).with_name("sample_scenario.yaml")
DEMO_VERSION_ID = "demo-v1"


def seed(db_path: str = DEFAULT_DB_PATH) -> int:
    """Compute the sample scenario and store it as ``demo-v1``."""
    initialize_schema(db_path)
    summary = compute_scenario(load_scenario(str(SAMPLE_SCENARIO)))
    return ComputedFactRepository(db_path).save_summary(DEMO_VERSION_ID, summary)


if __name__ == "__main__":
    rows = seed()
    print(f"Demo computed facts inserted ({rows} rows)")
