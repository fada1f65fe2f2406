"""
Script to seed dummy roll data and an API key for local testing
Run with: python -m voter_roll.scripts.seed_dummy_data
"""
import asyncio
from sqlalchemy import select
from voter_roll.database import AsyncSessionLocal, init_db
from voter_roll.models.api_key import ApiKey, ApiKeyStatus
from voter_roll.models.legacy_part import LegacyPart, LegacyPart2025
from voter_roll.core.partitions import PARTITIONS
from voter_roll.core.security import generate_api_key, encrypt_api_key

DEMO_CONSTITUENCY = "AC210"
DEMO_AC_NO = 210
DEMO_PART_NO = 5

# Serial numbers 22 and 24 are missing, as after roll corrections
DEMO_SERIALS = [15, 16, 17, 18, 19, 20, 21, 23, 25, 26]

DEMO_NAMES = [
    ("Murugan", "Raman", "F", "M", 45),
    ("Lakshmi", "Murugan", "H", "F", 41),
    ("Senthil", "Murugan", "F", "M", 19),
    ("Kavitha", "Senthil", "H", "F", 33),
    ("Arjun", "Kavitha", "M", "M", 22),
    ("Meena", "Selvam", "F", "F", 28),
    ("Selvam", "Ganesan", "F", "M", 60),
    ("Priya", "Selvam", "F", "F", 25),
    ("Ravi", "Kumar", "B", "M", 38),
    ("Anitha", "Ravi", "H", "F", 36),
]


async def seed_data():
    """Seed dummy data"""
    print("Seeding dummy data...")
    await init_db()

    partition = PARTITIONS[DEMO_CONSTITUENCY]

    async with AsyncSessionLocal() as db:
        existing = await db.execute(
            select(partition).where(partition.part_no == DEMO_PART_NO).limit(1)
        )
        if existing.scalar_one_or_none():
            print(f"{DEMO_CONSTITUENCY} part {DEMO_PART_NO} already seeded, skipping roll data...")
        else:
            print(f"Creating {DEMO_CONSTITUENCY} part {DEMO_PART_NO} roll...")
            for serial, (name, relation_name, relation_type, sex, age) in zip(DEMO_SERIALS, DEMO_NAMES):
                db.add(partition(
                    ac_no=DEMO_AC_NO,
                    part_no=DEMO_PART_NO,
                    sl_no_in_part=serial,
                    house_no=str(serial // 3 + 1),
                    section_no="1",
                    fm_name_v2=name,
                    rln_fm_nm_v2=relation_name,
                    rln_type=relation_type,
                    age=age,
                    sex=sex,
                    id_card_no=f"TNX{DEMO_PART_NO:03d}{serial:04d}",
                    ps_name="Panchayat Union School (old name)",
                ))

            print("Creating legacy part reference data...")
            for model in (LegacyPart, LegacyPart2025):
                db.add(model(
                    ac_no=DEMO_AC_NO,
                    part_no=DEMO_PART_NO,
                    part_name_v1="Panchayat Union Middle School, North Wing",
                    part_name_tn="ஊராட்சி ஒன்றிய நடுநிலைப் பள்ளி, வடக்கு பகுதி",
                    locality_v1="Keelapalayam",
                    locality_tn="கீழப்பாளையம்",
                ))

        print("Creating API key...")
        full_key, key_hash, key_prefix = generate_api_key()
        db.add(ApiKey(
            name="Local development",
            key_hash=key_hash,
            key_prefix=key_prefix,
            status=ApiKeyStatus.ACTIVE,
            encrypted_key=encrypt_api_key(full_key),
        ))

        await db.commit()

    print("\n✅ Dummy data seeded successfully!")
    print(f"\nAPI Key: {full_key}")
    print("\n📋 Test Data Created:")
    print(f"  - Neighbors: tsc={DEMO_CONSTITUENCY}&partNo={DEMO_PART_NO}&slNoInPart=20")


if __name__ == "__main__":
    asyncio.run(seed_data())
