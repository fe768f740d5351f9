"""Base test case for API tests: fresh rows per test on the shared in-memory database."""
import unittest
from functools import lru_cache

from fastapi.testclient import TestClient

from campsite_api.database import Base, SessionLocal, engine
from campsite_api.main import app
from campsite_api.models.campsite import Amenity, Campsite, CampsiteStatus, CampsiteType
from campsite_api.models.profile import Profile, ProfileRole
from campsite_api.models.province import Province
from campsite_api.models.review import Review
from campsite_api.seed import seed_reference_data
from campsite_api.services.auth import create_access_token, get_password_hash
from campsite_api.services.campsites import generate_unique_slug
from campsite_api.services.rate_limit import inquiry_limiter, password_reset_limiter

PASSWORD = "Password123!"
REFERENCE_TABLES = {"provinces", "campsite_types", "amenities"}
LONG_TEXT = "Shady pitches, clean facilities and friendly staff near the national park."


@lru_cache
def password_hash() -> str:
    return get_password_hash(PASSWORD)


class ApiTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        Base.metadata.create_all(bind=engine)
        with SessionLocal() as db:
            seed_reference_data(db)

    def setUp(self):
        with engine.begin() as conn:
            for table in reversed(Base.metadata.sorted_tables):
                if table.name not in REFERENCE_TABLES:
                    conn.execute(table.delete())
        inquiry_limiter.reset()
        password_reset_limiter.reset()
        self.client = TestClient(app)
        self._emails = 0

    # ----- builders -----

    def make_user(self, role: ProfileRole = ProfileRole.user, email: str | None = None, full_name: str = "Test User") -> Profile:
        if email is None:
            self._emails += 1
            email = f"{role.value}{self._emails}@example.com"
        with SessionLocal() as db:
            user = Profile(email=email, hashed_password=password_hash(), full_name=full_name, role=role)
            db.add(user)
            db.commit()
            db.refresh(user)
            return user

    def auth(self, user: Profile) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.role)}"}

    def make_campsite(
        self,
        owner: Profile,
        name: str = "Khao Yai Forest Camp",
        *,
        status: CampsiteStatus = CampsiteStatus.approved,
        province_slug: str = "bangkok",
        type_slug: str = "camping",
        price_min: float = 500,
        price_max: float = 1500,
        latitude: float | None = 14.43,
        longitude: float | None = 101.37,
        rating: float = 0,
        featured: bool = False,
        amenity_slugs: tuple = (),
    ) -> Campsite:
        with SessionLocal() as db:
            province = db.query(Province).filter(Province.slug == province_slug).one()
            campsite_type = db.query(CampsiteType).filter(CampsiteType.slug == type_slug).one()
            c = Campsite(
                owner_id=owner.id,
                name=name,
                slug=generate_unique_slug(db, name),
                description=LONG_TEXT,
                province_id=province.id,
                type_id=campsite_type.id,
                price_min=price_min,
                price_max=price_max,
                latitude=latitude,
                longitude=longitude,
                status=status,
                rating_average=rating,
                is_featured=featured,
            )
            if amenity_slugs:
                c.amenities = db.query(Amenity).filter(Amenity.slug.in_(amenity_slugs)).all()
            db.add(c)
            db.commit()
            db.refresh(c)
            return c

    def make_review(self, campsite: Campsite, user: Profile, rating: int = 4, **fields) -> Review:
        with SessionLocal() as db:
            r = Review(
                campsite_id=campsite.id,
                user_id=user.id,
                rating_overall=rating,
                content=fields.pop("content", LONG_TEXT),
                **fields,
            )
            db.add(r)
            db.commit()
            db.refresh(r)
            return r

    def amenity_id(self, slug: str) -> int:
        with SessionLocal() as db:
            return db.query(Amenity.id).filter(Amenity.slug == slug).scalar()

    def province_id(self, slug: str) -> int:
        with SessionLocal() as db:
            return db.query(Province.id).filter(Province.slug == slug).scalar()

    def type_id(self, slug: str) -> int:
        with SessionLocal() as db:
            return db.query(CampsiteType.id).filter(CampsiteType.slug == slug).scalar()
