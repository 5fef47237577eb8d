"""
Bootstrap data.

``ensure_admin`` runs on every startup. Sample content is only added on
request:

    python -m medterm.seed
"""
import asyncio
import logging

import aiosqlite

from medterm.config import settings
from medterm.db import init_all_databases
from medterm.db.sqlite import (
    connect,
    create_category,
    create_phrase,
    create_term,
    create_user,
    find_category_by_name,
    get_user_credentials,
    phrase_text_exists,
    term_text_exists,
)
from medterm.logging_setup import configure_logging
from medterm.models.category import CategoryCreate
from medterm.models.phrase import PhraseCreate
from medterm.models.term import TermCreate
from medterm.models.user import Role, User, UserCreate
from medterm.services.auth import hash_password

logger = logging.getLogger(__name__)

SAMPLE_CATEGORIES = [
    ("Cardiology", "Heart and circulatory system", "#dc2626"),
    ("Neurology", "Nervous system and brain", "#2563eb"),
    ("Gastroenterology", "Digestive system", "#16a34a"),
    ("Orthopedics", "Musculoskeletal system", "#ea580c"),
    ("Pediatrics", "Medical care for children", "#9333ea"),
    ("Dermatology", "Skin and its diseases", "#ca8a04"),
]

SAMPLE_TERMS = [
    ("Hypertension", "High blood pressure", "haɪ.pərˈten.ʃən"),
    ("Tachycardia", "Abnormally rapid heart rate", "tæk.ɪˈkɑːr.di.ə"),
    ("Cerebrovascular", "Relating to the brain and its blood vessels", "sɛr.ɪ.broʊˈvæs.kjə.lər"),
    ("Arthritis", "Inflammation of joints", "ɑːrˈθraɪ.tɪs"),
    ("Diabetes", "Metabolic disorder characterized by high blood sugar", "ˌdaɪ.əˈbiː.tiːz"),
    ("Pneumonia", "Inflammation of the lungs", "nuːˈmoʊ.njə"),
]

SAMPLE_PHRASES = [
    ("MI", "Myocardial Infarction - Heart attack"),
    ("CVA", "Cerebrovascular Accident - Stroke"),
    ("GERD", "Gastroesophageal Reflux Disease"),
    ("COPD", "Chronic Obstructive Pulmonary Disease"),
    ("UTI", "Urinary Tract Infection"),
    ("AED", "Automated External Defibrillator"),
]


async def ensure_admin(db: aiosqlite.Connection) -> User:
    """Create the configured admin account unless that username already exists."""
    existing = await get_user_credentials(db, settings.admin_username)
    if existing is not None:
        return existing[0]
    admin = await create_user(
        db,
        UserCreate(
            username=settings.admin_username,
            email=settings.admin_email,
            password=settings.admin_password,
            role=Role.ADMIN,
        ),
        hash_password(settings.admin_password),
    )
    logger.info("Created admin account %r", admin.username)
    return admin


async def seed_sample_data(db: aiosqlite.Connection, owner: User) -> dict[str, int]:
    """Add the sample categories, terms and phrases the owner does not have yet."""
    counts = {"categories": 0, "terms": 0, "phrases": 0}

    for name, description, color in SAMPLE_CATEGORIES:
        if await find_category_by_name(db, owner.id, name) is None:
            await create_category(
                db, owner.id, CategoryCreate(name=name, description=description, color=color)
            )
            counts["categories"] += 1

    for term, meaning, pronunciation in SAMPLE_TERMS:
        if not await term_text_exists(db, owner.id, term):
            await create_term(
                db, owner.id, TermCreate(term=term, meaning=meaning, pronunciation=pronunciation)
            )
            counts["terms"] += 1

    for phrase, explanation in SAMPLE_PHRASES:
        if not await phrase_text_exists(db, owner.id, phrase):
            await create_phrase(db, owner.id, PhraseCreate(phrase=phrase, explanation=explanation))
            counts["phrases"] += 1

    logger.info(
        "Seeded %d categories, %d terms, %d phrases for %s",
        counts["categories"],
        counts["terms"],
        counts["phrases"],
        owner.username,
    )
    return counts


async def main() -> None:
    configure_logging(
        settings.data_dir / settings.logs_dirname, settings.log_filename, settings.log_level
    )
    await init_all_databases(settings.data_dir)
    async with connect() as db:
        admin = await ensure_admin(db)
        await seed_sample_data(db, admin)


if __name__ == "__main__":
    asyncio.run(main())
