#!/usr/bin/env python3
"""
Seed the database with a demo organization for local kiosk testing.

Creates two households with adults and youth plus one active event.
Running it twice is safe: existing families are left alone.

Usage:
    python scripts/seed.py [--organization-id=demo-org]
"""
import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session, select

from kiosk.core.database import create_db_and_tables, engine
from kiosk.models import Event, EventStatus, Family, Person, PersonRole
from kiosk.services.directory import normalize_phone_to_e164, phone_last4

HOUSEHOLDS = [
    {
        "family_name": "Smith",
        "phone": "555-123-4567",
        "people": [
            ("Jane", "Smith", PersonRole.ADULT),
            ("John", "Smith", PersonRole.YOUTH),
            ("Emily", "Smith", PersonRole.YOUTH),
        ],
    },
    {
        "family_name": "Johnson",
        "phone": "555-987-6543",
        "people": [
            ("Mike", "Johnson", PersonRole.ADULT),
            ("Sarah", "Johnson", PersonRole.YOUTH),
        ],
    },
]


def seed_household(session: Session, organization_id: str, household: dict) -> bool:
    """Create a household and its members. Returns True if created."""
    phone = normalize_phone_to_e164(household["phone"])
    existing = session.exec(
        select(Family)
        .where(Family.organization_id == organization_id)
        .where(Family.primary_phone_e164 == phone)
    ).first()
    if existing:
        print(f"  Skipping {household['family_name']}: already exists")
        return False

    family = Family(
        organization_id=organization_id,
        primary_phone_e164=phone,
        phone_last4=phone_last4(phone),
        family_name=household["family_name"],
    )
    session.add(family)
    session.flush()

    for first_name, last_name, role in household["people"]:
        session.add(
            Person(
                organization_id=organization_id,
                family_id=family.id,
                first_name=first_name,
                last_name=last_name,
                role=role,
            )
        )

    print(f"  Created {family.family_name} ({len(household['people'])} people)")
    return True


def main(organization_id: str):
    create_db_and_tables()

    with Session(engine) as session:
        print("Seeding households...")
        for household in HOUSEHOLDS:
            seed_household(session, organization_id, household)

        event_id = f"{organization_id}-weekly-meeting"
        if not session.get(Event, event_id):
            session.add(
                Event(
                    id=event_id,
                    organization_id=organization_id,
                    title="Weekly Meeting",
                    location="Fellowship Hall",
                    status=EventStatus.ACTIVE,
                )
            )
            print(f"  Created event {event_id}")

        session.commit()

    print("Done.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo kiosk data")
    parser.add_argument("--organization-id", default="demo-org", help="Organization to seed")
    args = parser.parse_args()
    main(args.organization_id)
