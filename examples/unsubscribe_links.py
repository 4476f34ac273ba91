#!/usr/bin/env python3
"""
One-Click Unsubscribe Links
===========================

Shows how to sign a small payload into a URL-safe token and verify it when
the link is clicked, without storing anything server-side.

Usage:
    MSGVERIFIER_SECRET=... python unsubscribe_links.py
"""

from urllib.parse import quote, unquote

from msgverifier import (
    InvalidSignature,
    MessageVerifier,
    generate_secret,
    load_config_from_env,
)


def build_verifier() -> MessageVerifier:
    """Use the secret from the environment, or a throwaway one for the demo."""
    config = load_config_from_env()
    if config.secret is None:
        print("⚠️  MSGVERIFIER_SECRET not set, using a random secret")
        config.secret = generate_secret()
    return MessageVerifier.from_config(config)


def main():
    verifier = build_verifier()

    print("=== Unsubscribe Link Demo ===\n")

    token = verifier.generate({"email": "user@example.com", "list": "weekly"})
    link = f"https://example.com/unsubscribe?token={quote(token)}"
    print(f"🔗 Link: {link}")

    # The click handler gets the token back from the query string
    received = unquote(link.split("token=", 1)[1])
    payload = verifier.verify(received, target=dict)
    print(f"✅ Unsubscribing {payload['email']} from {payload['list']}")

    forged = received.replace(received[0], "A" if received[0] != "A" else "B", 1)
    try:
        verifier.verify(forged)
    except InvalidSignature as e:
        print(f"🛑 Forged link rejected: {e}")


if __name__ == "__main__":
    main()
