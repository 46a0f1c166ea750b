#!/usr/bin/env python3
"""
EMU2600CV -- CommaVid cartridge inspector.

Main entry point.  Parses command-line arguments, loads a CV image, installs
it on a 2600 address space and performs the requested inspection or
save-state actions.

Usage examples::

    # Print image metadata
    emu2600cv magicard.bin --info

    # Reset and dump RAM, with a fixed seed for 2 KB images
    emu2600cv game.bin --dump-ram --seed 42

    # Read through the bus (a write-port read latches the bus value)
    emu2600cv game.bin --peek 0x1800 --peek 0x1400

    # Save and restore cart RAM
    emu2600cv game.bin --save-state game.sta
    emu2600cv game.bin --load-state game.sta --dump-ram
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from emu2600cv.core.serializer import Serializer
from emu2600cv.core.settings import Settings
from emu2600cv.shell.services.cart_factory import CartFactory


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------

def _parse_int(text: str) -> int:
    """Accept ``$1400``, ``0x1400`` or plain decimal."""
    text = text.strip()
    try:
        if text.startswith("$"):
            return int(text[1:], 16)
        return int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None


def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser."""
    parser = argparse.ArgumentParser(
        prog="emu2600cv",
        description=(
            "EMU2600CV -- inspect CommaVid (CV) Atari 2600 cartridge images.  "
            "Loads a 2 KB or 4 KB image and exercises it through the bus."
        ),
    )

    parser.add_argument(
        "rom",
        help="Path to the 2 KB or 4 KB CV image",
    )

    # RAM power-on configuration
    parser.add_argument(
        "--seed",
        type=_parse_int,
        default=0,
        help="Seed for the pseudo-random RAM fill of 2 KB images.  Default: 0.",
    )
    parser.add_argument(
        "--no-ram-random",
        action="store_true",
        default=False,
        help="Fill uninitialised RAM with --ram-fill instead of random bytes.",
    )
    parser.add_argument(
        "--ram-fill",
        type=_parse_int,
        default=0,
        metavar="BYTE",
        help="Fill byte used with --no-ram-random.  Default: 0.",
    )

    # Actions
    parser.add_argument(
        "--info",
        action="store_true",
        default=False,
        help="Print image metadata and exit.",
    )
    parser.add_argument(
        "--load-state",
        default=None,
        metavar="PATH",
        help="Restore cart RAM from a state file after reset.",
    )
    parser.add_argument(
        "--peek",
        type=_parse_int,
        action="append",
        default=[],
        metavar="ADDR",
        help="Read ADDR through the bus (may be repeated).",
    )
    parser.add_argument(
        "--dump-ram",
        action="store_true",
        default=False,
        help="Print cart RAM as a hex dump.",
    )
    parser.add_argument(
        "--save-state",
        default=None,
        metavar="PATH",
        help="Write cart RAM to a state file.",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
    )

    return parser


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _configure_logging(verbosity: int) -> None:
    """Set up the root logger based on requested verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _print_rom_info(rom_path: str) -> int:
    """Print human-readable metadata for a ROM."""
    try:
        info = CartFactory.describe(rom_path)
    except ValueError as exc:
        print(f"Error reading ROM: {exc}", file=sys.stderr)
        return 1

    print("EMU2600CV ROM Information")
    print("=" * 40)
    for key, value in info.items():
        label = key.replace("_", " ").title()
        print(f"  {label:20s}: {value}")
    print("=" * 40)
    return 0


def _hex_dump(data: bytes, base: int) -> None:
    for offset in range(0, len(data), 16):
        row = data[offset:offset + 16]
        print(f"${base + offset:04X}: " + " ".join(f"{b:02X}" for b in row))


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` to use ``sys.argv``.

    Returns
    -------
    int
        Exit code (0 on success).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    logger = logging.getLogger("emu2600cv.main")

    rom_path: str = os.path.expanduser(args.rom)
    if not os.path.isfile(rom_path):
        print(f"Error: ROM file not found: {rom_path}", file=sys.stderr)
        return 1

    if args.info:
        return _print_rom_info(rom_path)

    try:
        settings = Settings(
            ram_random=not args.no_ram_random,
            ram_seed=args.seed,
            ram_fill=args.ram_fill,
        )
        cart, bus = CartFactory.create(rom_path, settings=settings)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.load_state:
        try:
            with open(os.path.expanduser(args.load_state), "rb") as fh:
                loaded = cart.load(Serializer(fh))
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        if not loaded:
            print(
                f"Error: failed to restore {cart.name} state from {args.load_state}",
                file=sys.stderr,
            )
            return 1
        logger.info("Restored RAM from %s", args.load_state)

    for addr in args.peek:
        value = bus.peek(addr)
        print(f"${addr & 0x1FFF:04X} = ${value:02X}")

    if args.dump_ram:
        # Listed at the read port addresses.
        _hex_dump(bytes(cart.ram), 0x1000)

    if args.save_state:
        try:
            with open(os.path.expanduser(args.save_state), "wb") as fh:
                saved = cart.save(Serializer(fh))
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        if not saved:
            print("Error: failed to write state", file=sys.stderr)
            return 1
        logger.info("Saved RAM to %s", args.save_state)

    return 0


if __name__ == "__main__":
    sys.exit(main())
