"""
Sample walk data for a client/walker pair

Usage:
    python scripts/add_sample_walks.py <client_uid> <walker_uid> [days]

Example:
    python scripts/add_sample_walks.py abc123 xyz789 10
    # completed walks with GPS tracks over the last 10 days, plus the affiliation
"""
import sys
import os
from datetime import datetime, timedelta
import random

# project root on the Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from app.db import SessionLocal
from app.models.affiliation import Affiliation
from app.models.location import Location
from app.models.profile import Profile
from app.models.walk import Walk, WalkStatus

DOG_NAMES = ["Firulais", "Luna", "Max", "Canela", "Rocky", "Nala"]

# Aguascalientes centro
BASE_LAT = 21.8818
BASE_LNG = -102.2916


def random_track(start_time: datetime, duration_min: int, every_min: int = 5):
    """Small random walk around the base point, one point every few minutes."""
    lat = BASE_LAT + random.uniform(-0.01, 0.01)
    lng = BASE_LNG + random.uniform(-0.01, 0.01)
    points = []
    for minute in range(0, duration_min + 1, every_min):
        lat += random.uniform(-0.0008, 0.0008)
        lng += random.uniform(-0.0008, 0.0008)
        points.append((round(lat, 6), round(lng, 6), start_time + timedelta(minutes=minute)))
    return points


def add_sample_walks(client_id: str, walker_id: str, num_days: int = 14):
    db = SessionLocal()

    try:
        client = db.get(Profile, client_id)
        walker = db.get(Profile, walker_id)
        if client is None or walker is None:
            print("[ERROR] client or walker profile not found")
            return False

        affiliation = (
            db.query(Affiliation)
            .filter(Affiliation.user_id == client_id, Affiliation.admin_id == walker_id)
            .first()
        )
        if affiliation is None:
            db.add(Affiliation(user_id=client_id, admin_id=walker_id, is_active=True))
            print(f"[OK] affiliation {client.name} -> {walker.name} created")
        else:
            affiliation.is_active = True

        walks_created = 0
        for day_offset in range(num_days):
            base_date = datetime.utcnow() - timedelta(days=day_offset)
            hour = random.choice([random.randint(8, 10), random.randint(15, 18)])
            start_time = base_date.replace(hour=hour, minute=random.randint(0, 59), second=0, microsecond=0)
            duration_min = random.choice([30, 45, 60, 90])
            end_time = start_time + timedelta(minutes=duration_min)

            walk = Walk(
                client_id=client_id,
                walker_id=walker_id,
                dog_name=random.choice(DOG_NAMES),
                status=WalkStatus.COMPLETED,
                start_time=start_time,
                end_time=end_time,
                created_at=start_time,
            )
            db.add(walk)
            db.flush()

            track = random_track(start_time, duration_min)
            for lat, lng, ts in track:
                db.add(Location(walk_id=walk.id, latitude=lat, longitude=lng, timestamp=ts))

            walks_created += 1
            print(f"  [{walks_created}] {start_time:%Y-%m-%d %H:%M} {walk.dog_name} "
                  f"{duration_min} min, {len(track)} points")

        walker.completed_walks_count = (walker.completed_walks_count or 0) + walks_created
        db.commit()
        print(f"\n[OK] {walks_created} sample walks added")
        return True

    except Exception as e:
        db.rollback()
        print(f"[ERROR] {e}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python scripts/add_sample_walks.py <client_uid> <walker_uid> [days]")
        sys.exit(1)

    days = int(sys.argv[3]) if len(sys.argv) > 3 else 14
    ok = add_sample_walks(sys.argv[1], sys.argv[2], days)
    sys.exit(0 if ok else 1)
