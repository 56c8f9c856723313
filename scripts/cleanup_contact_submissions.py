#!/usr/bin/env python3
"""
Alkitu Site - Clean Up Test Contact Submissions
Lists contact submissions that look like test data and deletes them on request.

Usage:
    python scripts/cleanup_contact_submissions.py          # dry run
    python scripts/cleanup_contact_submissions.py --yes    # delete
"""
import os
import sys
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from alkitu import create_app
from alkitu.database import db
from alkitu.services.contact_service import contact_service

TEST_PATTERNS = [
    'test', 'prueba', 'demo', 'ejemplo', 'asdf', 'qwerty',
    '@test.', '@example.', '@demo.',
]


def main():
    parser = argparse.ArgumentParser(description='Delete contact submissions that look like test data')
    parser.add_argument('--yes', action='store_true', help='Delete the matches instead of listing them')
    parser.add_argument('--pattern', action='append', default=[],
                        help='Extra pattern matched against name, email and subject')
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        matches = contact_service.find_test_submissions(TEST_PATTERNS + args.pattern)
        if not matches:
            print("No test submissions found.")
            return 0

        print(f"\nFound {len(matches)} test submission(s):\n")
        for s in matches:
            created = s.created_at.strftime('%Y-%m-%d %H:%M') if s.created_at else '-'
            print(f"  {created}  {s.email:<35} {s.subject[:50]}")

        if not args.yes:
            print("\nDry run: nothing deleted. Re-run with --yes to delete.")
            return 0

        for s in matches:
            db.session.delete(s)
        db.session.commit()
        print(f"\n✅ Deleted {len(matches)} submission(s).")
        return 0


if __name__ == '__main__':
    sys.exit(main())
