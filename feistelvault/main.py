"""
FeistelVault - Main Entry Point
Demonstrates the Feistel cipher end to end.

Run with: python -m feistelvault.main [--mode CBC] [--verbose]
"""

import argparse
import logging

from .auth.password_strength import check_password
from .core_crypto.cipher import FeistelCipher, unpack_envelope
from .core_crypto.constants import BLOCK_SIZE, LOG_LEVEL
from .core_crypto.kdf import derive_key, generate_salt
from .core_crypto.modes import CipherMode


DEMO_PASSWORD = "MySecretPassword123"
DEMO_MESSAGE = "This is a test message for our custom Feistel cipher implementation."


def print_header(title):
    """Print a formatted section header"""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def print_step(step_num, description):
    """Print a numbered step"""
    print(f"\n  [{step_num}] {description}")


def demo_round_trip(mode: CipherMode) -> bool:
    print_header(f"PART 1: ROUND TRIP ({mode.value})")

    print_step("1.1", "Password strength")
    report = check_password(DEMO_PASSWORD)
    print(f"  Password: {'*' * len(DEMO_PASSWORD)}")
    print(f"  Strength: {report['strength'].value} ({report['score']}/5)")
    if report['missing']:
        print(f"  Missing: {', '.join(report['missing'])}")

    print_step("1.2", "Key derivation")
    cipher = FeistelCipher(DEMO_PASSWORD, mode=mode)
    print(f"  Salt: {cipher.salt.hex()}")
    print(f"  Key:  {cipher.key.hex()[:32]}...")

    print_step("1.3", "Encrypt / decrypt")
    envelope = cipher.encrypt(DEMO_MESSAGE)
    decrypted = cipher.decrypt(envelope)
    print(f"  Plaintext: {DEMO_MESSAGE}")
    print(f"  Envelope:  {envelope[:60]}...")
    print(f"  Decrypted: {decrypted}")
    print(f"  Match: {decrypted == DEMO_MESSAGE}")

    print_step("1.4", "Re-deriving the key without the salt")
    other_key = derive_key(DEMO_PASSWORD, generate_salt())
    print(f"  Same key: {other_key == cipher.key} (the salt must be kept!)")

    return decrypted == DEMO_MESSAGE


def demo_ecb_leakage() -> None:
    print_header("PART 2: ECB PATTERN LEAKAGE")

    message = "A" * BLOCK_SIZE * 2
    for mode in CipherMode:
        cipher = FeistelCipher(DEMO_PASSWORD, mode=mode)
        _, raw = unpack_envelope(cipher.encrypt(message), mode)
        first, second = raw[:BLOCK_SIZE], raw[BLOCK_SIZE:2 * BLOCK_SIZE]
        print(f"  {mode.value}: identical blocks -> identical ciphertext: {first == second}")


def main(argv=None):
    """Main entry point for FeistelVault."""
    parser = argparse.ArgumentParser(description="Feistel cipher demonstration")
    parser.add_argument("--mode", default="CBC", help="ECB, CBC or CTR")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    print("=" * 70)
    print("Welcome to FeistelVault")
    print("=" * 70)
    print("\n  WARNING: educational cipher, not for protecting real data.")

    ok = demo_round_trip(CipherMode.from_name(args.mode))
    demo_ecb_leakage()

    print("\n" + "=" * 70)
    print(f"Overall: {'Round trip succeeded!' if ok else 'Round trip FAILED!'}")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
