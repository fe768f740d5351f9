"""
Create a test admin, owner and user, plus one approved demo campsite owned by the test owner.
Use in development so you can log in to the dashboard and admin pages right away.

Run from project root (after `pip install -e .`):
  python scripts/create_test_users.py

Credentials are printed at the end.
"""
from campsite_api.database import Base, SessionLocal, engine
from campsite_api.models.campsite import Amenity, Campsite, CampsiteStatus, CampsiteType
from campsite_api.models.profile import Profile, ProfileRole
from campsite_api.models.province import Province
from campsite_api.seed import seed_reference_data
from campsite_api.services.auth import get_password_hash
from campsite_api.services.campsites import generate_unique_slug

# Default credentials (change if you want)
PASSWORD = "Password123!"
USERS = (
    ("admin@campingthailand.demo", "Test Admin", ProfileRole.admin),
    ("owner@campingthailand.demo", "Test Owner", ProfileRole.owner),
    ("user@campingthailand.demo", "Test Camper", ProfileRole.user),
)

DEMO_CAMPSITE = {
    "name": "Doi Inthanon Riverside Camp",
    "description": "Riverside tent pitches below Thailand's highest peak, with hot showers and a morning market nearby.",
    "province_slug": "chiang-mai",
    "type_slug": "camping",
    "latitude": 18.5886,
    "longitude": 98.4867,
    "price_min": 300,
    "price_max": 1200,
    "phone": "0812345678",
    "amenity_slugs": ("parking", "restroom", "shower", "bbq", "hiking-trail"),
}


def _ensure_user(db, email: str, full_name: str, role: ProfileRole) -> Profile:
    user = db.query(Profile).filter(Profile.email == email).first()
    if user:
        print(f"{role.value.title()} already exists: {email}")
        return user
    user = Profile(email=email, hashed_password=get_password_hash(PASSWORD), full_name=full_name, role=role)
    if role == ProfileRole.owner:
        user.business_name = f"{full_name} Camping Co."
    db.add(user)
    db.flush()
    print(f"Created {role.value}: {email}")
    return user


def _ensure_demo_campsite(db, owner: Profile) -> None:
    if db.query(Campsite).filter(Campsite.owner_id == owner.id, Campsite.name == DEMO_CAMPSITE["name"]).first():
        print(f"Demo campsite already exists: {DEMO_CAMPSITE['name']}")
        return
    province = db.query(Province).filter(Province.slug == DEMO_CAMPSITE["province_slug"]).first()
    campsite_type = db.query(CampsiteType).filter(CampsiteType.slug == DEMO_CAMPSITE["type_slug"]).first()
    if not province or not campsite_type:
        print("Reference data missing; run scripts/seed_reference_data.py first.")
        return
    campsite = Campsite(
        owner_id=owner.id,
        name=DEMO_CAMPSITE["name"],
        slug=generate_unique_slug(db, DEMO_CAMPSITE["name"]),
        description=DEMO_CAMPSITE["description"],
        province_id=province.id,
        type_id=campsite_type.id,
        latitude=DEMO_CAMPSITE["latitude"],
        longitude=DEMO_CAMPSITE["longitude"],
        price_min=DEMO_CAMPSITE["price_min"],
        price_max=DEMO_CAMPSITE["price_max"],
        phone=DEMO_CAMPSITE["phone"],
        status=CampsiteStatus.approved,
        is_featured=True,
    )
    campsite.amenities = db.query(Amenity).filter(Amenity.slug.in_(DEMO_CAMPSITE["amenity_slugs"])).all()
    db.add(campsite)
    db.flush()
    print(f"Created demo campsite: {campsite.name} (/{campsite.slug})")


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_reference_data(db)
        created = {role: _ensure_user(db, email, name, role) for email, name, role in USERS}
        _ensure_demo_campsite(db, created[ProfileRole.owner])
        db.commit()

        print("\n--- Test users ---")
        for email, _, role in USERS:
            print(f"{role.value.title()}:")
            print(f"  Email:    {email}")
            print(f"  Password: {PASSWORD}")
        print("\nDone.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
