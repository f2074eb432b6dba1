"""
vbsp-reader — decode a Source Engine BSP file and report its lumps.

Usage:
    vbsp-reader map.bsp
    vbsp-reader -v map.bsp

Exit status: 0 on success, 1 if the file cannot be read, 2 if it is not a
well-formed VBSP.
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .bsp_reader import RECORD_LUMPS, decode
from .errors import BSPFormatError, BSPIOError

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_FORMAT_ERROR = 2


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Decode a Source Engine BSP file (VBSP).')
    parser.add_argument('filename', help='Path to the BSP file')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print per-lump progress and a summary')
    args = parser.parse_args(argv)

    try:
        bsp = decode(args.filename, verbose=args.verbose)
    except BSPIOError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_IO_ERROR
    except BSPFormatError as e:
        print(f"Parsing error! {e}", file=sys.stderr)
        return EXIT_FORMAT_ERROR

    if args.verbose:
        print(f"\n{'='*50}")
        print(f"  Version:        {bsp.header.format_version}")
        print(f"  Map revision:   {bsp.header.map_revision}")
        print(f"  Entities:       {len(bsp.entities):,} bytes")
        for kind in RECORD_LUMPS:
            label = f"{kind.name.capitalize()}:"
            print(f"  {label:<16}{len(bsp.lump(kind)):,}")
        print(f"{'='*50}")

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
