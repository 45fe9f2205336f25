"""
College email helpers - map an email address to its college.
"""

from typing import Optional

from sqlalchemy import select

from campus_crush.db.database import fetch_all
from campus_crush.db.tables import colleges


def email_domain(email: str) -> str:
    return email.rsplit("@", 1)[-1].lower()


def domain_matches(domain: str, college_domain: str) -> bool:
    """Exact match, or a subdomain (cs.college.edu under college.edu)."""
    college_domain = college_domain.lower()
    return domain == college_domain or domain.endswith("." + college_domain)


def find_college_for_email(db, email: str) -> Optional[dict]:
    """Active college whose email domain matches, most specific first."""
    domain = email_domain(email)
    active = fetch_all(db, select(colleges).where(colleges.c.is_active.is_(True)))
    matches = [c for c in active if domain_matches(domain, c["email_domain"])]
    if not matches:
        return None
    return max(matches, key=lambda c: len(c["email_domain"]))
