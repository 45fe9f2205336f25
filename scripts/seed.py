#!/usr/bin/env python3
"""
Seed Script

Creates the default college, an admin account and ten verified test users.
Safe to run more than once: existing rows are left alone.

Usage: python scripts/seed.py
Env:   SEED_ADMIN_PASSWORD, SEED_USER_PASSWORD
"""
import os
import sys
sys.path.insert(0, '.')

from datetime import datetime

from sqlalchemy import insert, select

from campus_crush.core.auth import hash_password
from campus_crush.db.database import get_db_session, init_db, fetch_one
from campus_crush.db.tables import colleges, users

COLLEGE_NAME = "SGGS Institute of Engineering and Technology"
COLLEGE_DOMAIN = "sggs.ac.in"

ADMIN_EMAIL = f"admin@{COLLEGE_DOMAIN}"

TEST_USERS = [
    ("arjun.male", "Arjun", "Sharma", "male", "Computer Science student, loves coding and gaming"),
    ("priya.female", "Priya", "Patel", "female", "Mechanical Engineering student, passionate about robotics"),
    ("rahul.male", "Rahul", "Kumar", "male", "Electronics student, music enthusiast"),
    ("sneha.female", "Sneha", "Singh", "female", "Civil Engineering student, loves photography"),
    ("amit.male", "Amit", "Gupta", "male", "IT student, blockchain enthusiast"),
    ("kavya.female", "Kavya", "Reddy", "female", "Chemical Engineering student, loves dancing"),
    ("vikram.male", "Vikram", "Joshi", "male", "Electrical Engineering student, sports lover"),
    ("ananya.female", "Ananya", "Mehta", "female", "Computer Science student, AI researcher"),
    ("rohan.male", "Rohan", "Verma", "male", "Mechanical Engineering student, car enthusiast"),
    ("ishita.female", "Ishita", "Agarwal", "female", "Electronics student, loves reading and writing"),
]


def get_or_create_college(db) -> int:
    college = fetch_one(db, select(colleges.c.college_id).where(colleges.c.email_domain == COLLEGE_DOMAIN))
    if college:
        print(f"    - College already exists: {COLLEGE_NAME}")
        return college["college_id"]

    result = db.execute(
        insert(colleges).values(
            name=COLLEGE_NAME, email_domain=COLLEGE_DOMAIN, is_active=True, created_at=datetime.utcnow()
        ).returning(colleges.c.college_id)
    )
    print(f"    ✅ Created college: {COLLEGE_NAME}")
    return result.scalar_one()


def create_user_if_missing(db, values: dict) -> bool:
    existing = fetch_one(db, select(users.c.user_id).where(users.c.email == values["email"]))
    if existing:
        print(f"    - User already exists: {values['email']}")
        return False

    now = datetime.utcnow()
    db.execute(insert(users).values(**values, created_at=now, updated_at=now))
    print(f"    ✅ Created user: {values['email']}")
    return True


def main():
    admin_password = os.getenv("SEED_ADMIN_PASSWORD", "admin12345")
    user_password = os.getenv("SEED_USER_PASSWORD", "password123")

    print("=" * 50)
    print("CAMPUS CRUSH - SEED DATA")
    print("=" * 50)

    init_db()

    with get_db_session() as db:
        print("\n[1] College...")
        college_id = get_or_create_college(db)

        print("\n[2] Admin account...")
        create_user_if_missing(db, {
            "email": ADMIN_EMAIL,
            "password_hash": hash_password(admin_password),
            "role": "admin",
            "first_name": "Admin",
            "college_id": college_id,
            "verification_status": "verified",
            "verification_method": "email_domain"
        })

        print("\n[3] Test users...")
        created = 0
        for local_part, first_name, last_name, gender, bio in TEST_USERS:
            created += create_user_if_missing(db, {
                "email": f"{local_part}@{COLLEGE_DOMAIN}",
                "password_hash": hash_password(user_password),
                "role": "user",
                "first_name": first_name,
                "last_name": last_name,
                "display_name": f"{first_name} {last_name[0]}",
                "gender": gender,
                "bio": bio,
                "college_id": college_id,
                "verification_status": "verified",
                "verification_method": "email_domain"
            })

    print("\n" + "=" * 50)
    print(f"Seed complete! {created} new test users (password: {user_password})")
    print("=" * 50)


if __name__ == "__main__":
    main()
