#!/usr/bin/env python3
"""
Utility script to generate an API token for a user of the Keyword Search service.

Usage:
    python generate_token.py <user_id> [length]
"""
import secrets
import sys


def generate_token(length: int = 32) -> str:
    """
    Generate a cryptographically secure token.

    Args:
        length: Length of the token in bytes (default: 32)

    Returns:
        str: URL-safe base64 encoded token
    """
    return secrets.token_urlsafe(length)


def format_token_entry(token: str, user_id: str) -> str:
    """Render a ``token:user_id`` pair as it appears in API_TOKENS."""
    if ":" in user_id or "," in user_id:
        raise ValueError("User ID must not contain ':' or ','")
    return f"{token}:{user_id}"


def main():
    """Generate a token for the given user and print its API_TOKENS entry."""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    user_id = sys.argv[1]
    length = 32
    if len(sys.argv) > 2:
        try:
            length = int(sys.argv[2])
        except ValueError:
            print("Error: Length must be an integer")
            sys.exit(1)

    try:
        entry = format_token_entry(generate_token(length), user_id)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Generated API token for {user_id} (length={length}).")
    print("\nAppend this entry to API_TOKENS in your .env file (comma separated):")
    print(entry)


if __name__ == "__main__":
    main()
