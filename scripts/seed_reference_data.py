"""Standalone script to create DB tables and seed provinces, campsite types and amenities."""
from campsite_api.database import engine, SessionLocal, Base
from campsite_api.seed import seed_reference_data, PROVINCES, CAMPSITE_TYPES, AMENITIES

if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_reference_data(db)
        print(f"Reference data seeded: {len(PROVINCES)} provinces, {len(CAMPSITE_TYPES)} campsite types, {len(AMENITIES)} amenities.")
    finally:
        db.close()
