#!/usr/bin/env python3
"""
MIPS instruction-set simulator, command-line driver.

Loads a listing of 32-bit binary words (one per line), runs it from
address 0 until it falls off the end of the program or faults.

Usage:
  mips-sim PROGRAM [--max-steps N] [--dump] [--trace] [-v] [--log-level LEVEL]
"""
import argparse
import logging
import sys
from typing import List, Optional

from mips_core import MipsCore, RunState
from mips_errors import LoaderError, SimulatorFault
from mips_loader import load_program

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_STEP_LIMIT = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mips-sim',
        description='Run a MIPS binary listing (one 32-bit binary word per line).',
    )
    parser.add_argument('program', help='path to the binary listing')
    parser.add_argument('--max-steps', type=int, default=None, metavar='N',
                        help='stop after N instructions (default: no limit)')
    parser.add_argument('--dump', action='store_true',
                        help='print registers and data memory after the run')
    parser.add_argument('--trace', action='store_true',
                        help='log every executed instruction')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='shorthand for --log-level INFO')
    parser.add_argument('--log-level', default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    if args.trace:
        level = logging.DEBUG
    elif args.log_level:
        level = getattr(logging, args.log_level)
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s', stream=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.max_steps is not None and args.max_steps < 0:
        print('error: --max-steps must be non-negative', file=sys.stderr)
        return 2
    _configure_logging(args)

    try:
        words = load_program(args.program)
    except LoaderError as e:
        print(f'error: {e}', file=sys.stderr)
        return EXIT_ERROR

    core = MipsCore(words)
    code = EXIT_OK
    try:
        status = core.run(max_steps=args.max_steps)
    except SimulatorFault as e:
        print(f'error: {e.kind}: {e}', file=sys.stderr)
        code = EXIT_ERROR
    else:
        if status is RunState.RUNNING:
            print(f'stopped after {core.step_count} steps (limit reached) at pc=0x{core.state.pc:08x}',
                  file=sys.stderr)
            code = EXIT_STEP_LIMIT
        else:
            logger.info('Halted normally after %d steps', core.step_count)

    if args.dump:
        for line in core.state.dump_lines():
            print(line)
    return code


if __name__ == '__main__':
    sys.exit(main())
