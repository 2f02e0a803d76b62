import sys

import firebase_admin
from firebase_admin import credentials, auth
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
SERVICE_ACCOUNT_PATH = PROJECT_ROOT / "app" / "core" / "firebase_key.json"

ROLES = ("patient", "doctor")

if len(sys.argv) != 3 or sys.argv[2] not in ROLES:
    print("Usage: python set_role.py <uid> <patient|doctor>")
    sys.exit(1)

uid, role = sys.argv[1], sys.argv[2]

if not firebase_admin._apps:
    cred = credentials.Certificate(str(SERVICE_ACCOUNT_PATH))
    firebase_admin.initialize_app(cred)

auth.set_custom_user_claims(uid, {"role": role})

print(f"✅ Role '{role}' set for UID: {uid}")
print("✅ Now log out and log in again OR refresh token using getIdToken(true)")
