"""Example: drive the service layer directly, without Flask.

Reads a sign-in sheet, prints who matched, then prints the directory
with each member's attendance percentage.
"""

import importlib
import sys
from pathlib import Path

from config import get_settings_module

from src.club_portal.club_portal.audit.model import Actor
from src.club_portal.club_portal.container import build_container
from src.club_portal.club_portal.core.logging_config import configure_logging


def main(event_id: int, sheet: str):
    configure_logging("INFO", source="club-portal:example")
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    session = container.reconciliation_service.start(
        event_id=event_id,
        csv_text=Path(sheet).read_text(encoding="utf-8-sig"),
        actor=Actor(member_id=0, name="example script"),
    )
    for m in session.result.matched:
        print("matched  ", m.identifier, m.display_name)
    for c in session.result.unmatched:
        print("unmatched", c.identifier, c.display_name)
    container.reconciliation_service.cancel(session.token)

    for entry in container.directory_service.list_members(low_attendance=True):
        print(entry.member.name, f"{entry.stats.percentage}%")


if __name__ == "__main__":
    main(int(sys.argv[1]), sys.argv[2])
