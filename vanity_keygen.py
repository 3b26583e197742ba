#!/usr/bin/env python3
"""
Solana Vanity Keypair Generator
Searches for Ed25519 keypairs whose Base58 address ends with a chosen suffix.

Requirements:
    pip install PyNaCl base58 tqdm psutil

The search runs on up to 8 worker processes. The first worker to find a
matching address wins and the others are stopped. If no match is found within
the attempt budget (or the suffix is invalid) a random keypair is produced
instead, so the command always yields a usable key.

Matching:
  Exact matches are always preferred. When the suffix contains uppercase
  letters, an address whose lowercase form ends with the lowercase suffix is
  also accepted (use --exact-only to disable this).

Usage:
    python vanity_keygen.py --suffix pump              # Default 1M attempt budget
    python vanity_keygen.py --suffix Sun --keys 5M     # 5 million attempts
    python vanity_keygen.py --suffix 7 --no-parallel   # Single worker, 300K ceiling
    python vanity_keygen.py --suffix abc --workers 4   # Limit to 4 worker processes
    python vanity_keygen.py --suffix abc --json        # Save solana-keygen JSON keypair
    python vanity_keygen.py --config config.ini        # Read [vanity] section
"""

import argparse
import json
import logging
import os
from typing import Tuple

import base58

from vanity import (
    KeyPair,
    SearchCoordinator,
    keypair_from_seed,
    load_config,
    search_config_from_parser,
    verify_keypair
)
from vanity.probability import calculate_suffix_probability, format_probability
from vanity.suffix import BASE58_ALPHABET, is_base58
from vanity.system_utils import MAX_WORKERS, get_available_parallelism, log_system_status

logger = logging.getLogger(__name__)


class ArgumentParser:
    """Handles command line argument parsing and validation."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Solana Vanity Keypair Generator",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=ArgumentParser._get_examples()
        )

        ArgumentParser._add_arguments(parser)
        return parser

    @staticmethod
    def _add_arguments(parser: argparse.ArgumentParser):
        """Add command line arguments."""
        parser.add_argument('--suffix', type=str,
                          help='Base58 suffix the address should end with (e.g., pump)')
        parser.add_argument('--keys', type=ArgumentParser._parse_keys,
                          help='Total attempt budget (e.g., 500K, 1M, 0.5b)')
        parser.add_argument('--time', type=ArgumentParser._parse_time,
                          help='Wall-clock safety limit (seconds, or M:SS)')
        parser.add_argument('--batch-size', type=ArgumentParser._parse_keys,
                          help='Keys generated between stop checks (e.g., 100, 1K)')
        parser.add_argument('--workers', type=int,
                          help=f'Number of worker processes (default: available cores, max {MAX_WORKERS})')
        parser.add_argument('--no-parallel', action='store_false', dest='enable_parallel', default=None,
                          help='Always use the single-worker search path')
        parser.add_argument('--exact-only', action='store_false', dest='allow_case_insensitive', default=None,
                          help='Only accept exact (case-sensitive) suffix matches')
        parser.add_argument('--config', type=str, default='config.ini',
                          help='Path to config file with a [vanity] section (default: config.ini)')
        parser.add_argument('--progress', action='store_true', default=None, dest='show_progress',
                          help='Show a progress bar while searching')
        parser.add_argument('--verbose', '-v', action='store_true',
                          help='Enable debug logging including per-worker progress')

        # Test functions
        parser.add_argument('--test-compatibility', action='store_true',
                          help='Test key derivation against a known Ed25519 test vector')

        # Output options
        parser.add_argument('--json', action='store_true',
                          help='Save the keypair as a solana-keygen JSON array file')
        parser.add_argument('--output-dir', type=str, default='.',
                          help='Directory for saved key files (default: current directory)')

    @staticmethod
    def _parse_keys(keys_str: str) -> int:
        """Parse a key count.

        Examples:
            --keys 250000  -> 250,000 keys
            --keys 500K    -> 500,000 keys
            --keys 2M      -> 2,000,000 keys
            --keys 0.5b    -> 500,000,000 keys
        """
        multipliers = {'k': 1000, 'm': 1000000, 'b': 1000000000}
        try:
            value = keys_str.strip().lower()
            if value and value[-1] in multipliers:
                return int(float(value[:-1]) * multipliers[value[-1]])
            return int(value)
        except ValueError:
            raise argparse.ArgumentTypeError("Invalid number format")

    @staticmethod
    def _parse_time(time_str: str) -> int:
        """Parse time argument."""
        try:
            if ':' in time_str:
                minutes, seconds = time_str.split(':')
                return int(minutes) * 60 + int(seconds)
            else:
                return int(time_str)
        except ValueError:
            raise argparse.ArgumentTypeError("Invalid time format")

    @staticmethod
    def _get_examples() -> str:
        return """
Examples:
  python vanity_keygen.py --suffix pump                # Search with the default 1M budget
  python vanity_keygen.py --suffix Sun --keys 5M       # Search 5 million keys
  python vanity_keygen.py --suffix 7 --no-parallel     # Single worker search
  python vanity_keygen.py --suffix abc --exact-only    # Reject case-insensitive matches
  python vanity_keygen.py --suffix abc --json          # Save JSON keypair for solana-keygen
  python vanity_keygen.py --test-compatibility         # Check key derivation

Base58 alphabet: """ + BASE58_ALPHABET


def save_keys(keypair: KeyPair, output_dir: str = ".") -> Tuple[str, str]:
    """Save keys to text files and return filenames."""
    os.makedirs(output_dir, exist_ok=True)
    pub_filename = os.path.join(output_dir, f"{keypair.address}_public.txt")
    priv_filename = os.path.join(output_dir, f"{keypair.address}_private.txt")

    with open(pub_filename, 'w') as f:
        f.write(keypair.address)

    with open(priv_filename, 'w') as f:
        f.write(keypair.secret_key_base58)

    return pub_filename, priv_filename


def save_keys_json(keypair: KeyPair, output_dir: str = ".") -> str:
    """Save the keypair as a solana-keygen JSON array file."""
    os.makedirs(output_dir, exist_ok=True)
    json_filename = os.path.join(output_dir, f"{keypair.address}.json")

    with open(json_filename, 'w') as f:
        json.dump(keypair.to_json_array(), f)

    return json_filename


def test_compatibility() -> bool:
    """Test key derivation against RFC 8032 test vector 1."""
    print("=" * 60)
    print("TESTING Ed25519 / SOLANA KEY COMPATIBILITY")
    print("=" * 60)

    seed = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
    expected_public = "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"

    keypair = keypair_from_seed(seed)
    public_ok = keypair.public_key.hex() == expected_public
    address_ok = base58.b58decode(keypair.address) == keypair.public_key
    verify_ok = verify_keypair(keypair)

    print(f"Public key matches test vector: {'PASS' if public_ok else 'FAIL'}")
    print(f"Address decodes to public key:  {'PASS' if address_ok else 'FAIL'}")
    print(f"Keypair self-verification:      {'PASS' if verify_ok else 'FAIL'}")
    print(f"Address: {keypair.address}")
    return public_ok and address_ok and verify_ok


def main():
    """Main entry point."""
    parser = ArgumentParser.create_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()]
    )

    if args.test_compatibility:
        test_compatibility()
        return

    if args.workers is not None and args.workers < 1:
        print("Error: --workers must be at least 1.")
        return

    if args.batch_size is not None and args.batch_size < 1:
        print("Error: --batch-size must be at least 1.")
        return

    config = search_config_from_parser(load_config(args.config)).with_overrides(
        suffix=args.suffix,
        total_budget=args.keys,
        max_workers=args.workers,
        max_time=args.time,
        batch_size=args.batch_size,
        enable_parallel=args.enable_parallel,
        allow_case_insensitive=args.allow_case_insensitive,
        show_progress=args.show_progress,
    )

    print("=" * 60)
    print("SOLANA VANITY KEYPAIR GENERATOR")
    print("=" * 60)

    if config.suffix and is_base58(config.suffix):
        probability = calculate_suffix_probability(config.suffix, config.allow_case_insensitive
                                                   and config.suffix.lower() != config.suffix)
        print(f"Probability of a key matching '{config.suffix}': {format_probability(probability)}")
    print(f"Available CPUs: {get_available_parallelism()}")
    log_system_status()

    generator = SearchCoordinator(config)
    outcome = generator.search()
    keypair = outcome.keypair

    print("\nGenerated Solana Keypair:")
    print("-" * 40)
    if outcome.matched:
        print(f"Vanity match:   {outcome.match_kind.value}")
    else:
        print(f"Vanity match:   none ({outcome.fallback_reason.value})")
    print(f"Attempts:       {outcome.attempts:,}")
    print(f"Elapsed:        {outcome.elapsed_ms / 1000:.1f}s ({outcome.rate:,.0f} keys/sec)")
    print(f"\nAddress:\n{keypair.address}")

    is_valid = verify_keypair(keypair)
    print(f"\nKey Verification: {'PASS' if is_valid else 'FAIL'}")
    if not is_valid:
        print("\nWarning: Generated key failed verification, not saving it.")
        return

    if args.json:
        json_file = save_keys_json(keypair, args.output_dir)
        print(f"\nKeypair saved to JSON file (solana-keygen format):")
        print(f"  {json_file}")
    else:
        pub_file, priv_file = save_keys(keypair, args.output_dir)
        print(f"\nKeys saved to:")
        print(f"  Public:  {pub_file}")
        print(f"  Private: {priv_file}")

    print("\nKeep your private key secure and never share it!")


if __name__ == "__main__":
    main()
