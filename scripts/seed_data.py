#!/usr/bin/env python3
"""
Database seeding script for development and testing.
Creates one homeowner, one professional and one supplier, each with password "ChangeMe123!".
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path to import our modules
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from tradehub.config import Settings
from tradehub.database import build_engine, build_session_factory, create_tables
from tradehub.models import Professional, Supplier, User, UserType
from tradehub.services.auth_service import PasswordHasher
from tradehub.services.user_store import derive_username

SEED_PASSWORD = "ChangeMe123!"


def make_user(settings: Settings, hasher: PasswordHasher, user_type: UserType, name: str, email: str) -> User:
    return User(
        user_type=user_type.value,
        name=name,
        username=derive_username(name),
        email=email,
        password_hash=hasher.hash_password(SEED_PASSWORD),
        profile_picture_url=settings.default_avatar_url,
        cover_picture_url=settings.default_cover_url,
        is_verified=True,
    )


async def seed_data(settings: Settings):
    """Seed the database with sample data"""
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    if settings.environment == "development":
        await create_tables(engine)
        print("✓ Database tables created")

    async with session_factory() as session:
        try:
            homeowner = make_user(settings, hasher, UserType.HOMEOWNER, "Jane Doe", "jane.doe@example.com")
            professional = make_user(settings, hasher, UserType.PROFESSIONAL, "Bob Wilson", "bob.wilson@example.com")
            supplier = make_user(settings, hasher, UserType.SUPPLIER, "Maria Lopez", "maria.lopez@example.com")
            session.add_all([homeowner, professional, supplier])
            await session.flush()
            print("✓ Created users")

            session.add(Professional(
                user_id=professional.id,
                service_type="Carpentry",
                years_experience=15,
                bio="Custom cabinets, decks and trim work.",
                certifications="Licensed General Contractor",
                portfolio_link="https://example.com/bobwilson",
                portfolio=[],
            ))
            session.add(Supplier(
                user_id=supplier.id,
                business_name="Lopez Building Supply",
                contact_info="555-0142, orders@lopezsupply.example.com",
                additional_details="Lumber, drywall and fasteners. Same-day delivery within 20 miles.",
            ))
            await session.flush()
            print("✓ Created role profiles")

            await session.commit()
            print("\n✅ Database seeding completed successfully!")

            # Print summary
            print("\nSummary:")
            print(f"  - Homeowner:    {homeowner.email}")
            print(f"  - Professional: {professional.email}")
            print(f"  - Supplier:     {supplier.email}")
            print(f"  - Password:     {SEED_PASSWORD}")

        except Exception as e:
            await session.rollback()
            print(f"❌ Error seeding database: {e}")
            raise
        finally:
            await engine.dispose()


async def main():
    """Main function"""
    print("Starting database seeding...\n")
    await seed_data(Settings())


if __name__ == "__main__":
    asyncio.run(main())
