"""Example: use the service layer directly (no Flask).

Prints today's attendance statistics and one employee's latest records.
"""

import importlib
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src" / "worktime"))

from dotenv import load_dotenv

from config import get_settings_module

from worktime.container import build_container
from worktime.schedule.model import WorkSchedule


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, schedule=WorkSchedule.from_settings(settings))

    print(container.stats_service.get_stats().to_dict())
    if len(sys.argv) > 1:
        print(container.attendance_service.list_attendance(sys.argv[1], limit=5).to_dict())


if __name__ == "__main__":
    main()
