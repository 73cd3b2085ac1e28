"""Grant or revoke the manager role.

Usage: python scripts/set_role.py EMAIL manager|employee
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.timeclock.timeclock.container import build_container
from src.timeclock.timeclock.core.enums import Role
from src.timeclock.timeclock.core.exceptions import DomainError
from src.timeclock.timeclock.main import load_settings


def main(argv: list[str]) -> None:
    if len(argv) != 2:
        raise SystemExit(__doc__)
    email, role_s = argv
    try:
        role = Role(role_s.lower())
    except ValueError:
        raise SystemExit(f"Unknown role {role_s!r} (expected manager or employee)")

    container = build_container(load_settings())
    try:
        user = container.auth_service.set_role(email=email, role=role)
    except DomainError as e:
        raise SystemExit(f"Failed: {e}")
    finally:
        container.close()
    print(f"OK: {user.email} is now {user.role.value}")


if __name__ == "__main__":
    main(sys.argv[1:])
