#!/usr/bin/env python3
"""Generate a signing secret for bearer credentials.

Prints a random 32-byte secret, hex encoded, ready to be set as
TENANCY_AUTH_JWT_SECRET in the environment or in .env.
"""

import secrets

SECRET_BYTES = 32


def generate_jwt_secret() -> str:
    """Return a fresh hex-encoded secret."""
    return secrets.token_hex(SECRET_BYTES)


def main() -> None:
    secret = generate_jwt_secret()
    print("Generated JWT secret:")
    print(secret)
    print()
    print("Add it to your .env file:")
    print(f"TENANCY_AUTH_JWT_SECRET={secret}")
    print()
    print("Keep this secret private and never commit it to version control.")


if __name__ == "__main__":
    main()
