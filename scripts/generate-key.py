#!/usr/bin/env python3
"""Generate the secrets used to encrypt stored provider API keys."""

import secrets


def main() -> None:
    master_key = secrets.token_urlsafe(32)
    salt = secrets.token_hex(16)

    print("\n" + "=" * 60)
    print("  PROMPTFORGE: Encryption Key Generator")
    print("=" * 60)
    print()
    print("  Provider API keys are Fernet-encrypted with a key derived from")
    print("  these values. Changing them makes stored keys unreadable.")
    print()
    print("  Set them in your environment:")
    print(f'    export PROMPTFORGE_ENCRYPTION_KEY="{master_key}"')
    print(f'    export PROMPTFORGE_ENCRYPTION_SALT="{salt}"')
    print()
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
