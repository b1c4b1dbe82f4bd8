#!/usr/bin/env python3
"""
Generate an RSA key pair for the hybrid encryption server.

Prints .env lines with newlines escaped as "\\n", ready to paste:

    python scripts/generate_keys.py >> .env
"""

import argparse

from hybridcrypto.keys import generate_rsa_keypair


def env_line(name: str, pem: str) -> str:
    return f'{name}="{pem.strip()}"'.replace("\n", "\\n")


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--bits", type=int, default=2048, help="RSA modulus size (default: 2048)")
    args = parser.parse_args()

    private_pem, public_pem = generate_rsa_keypair(args.bits)
    print(env_line("PRIVATE_KEY_PEM", private_pem))
    print(env_line("PUBLIC_KEY_PEM", public_pem))


if __name__ == "__main__":
    main()
