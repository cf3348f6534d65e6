"""CLI entry point."""

import os
import shlex
import sys
from typing import List, Optional, Tuple

from common.logging_config import setup_component_logging
from cli.commands import close_filesystem, use_registry_uri
from cli.repl import repl_loop, run_once


def _split_options(argv: List[str]) -> Tuple[bool, Optional[str], List[str]]:
    """Pull --debug and --uri <uri> out of argv; the rest is a one-shot command."""
    debug = False
    uri = None
    rest = []
    args = iter(argv)
    for arg in args:
        if arg == '--debug':
            debug = True
        elif arg == '--uri':
            uri = next(args, None)
            if uri is None:
                raise SystemExit("--uri requires a value, e.g. --uri tachyon://registry:19998")
        elif arg.startswith('--uri='):
            uri = arg.split('=', 1)[1]
        else:
            rest.append(arg)
    return debug, uri, rest


def main() -> None:
    """
    Entry point for CLI.

    Without arguments starts the REPL; otherwise runs the given command
    once, e.g. ``overlay-cli stat /data/a.csv``.
    """
    debug, uri, command = _split_options(sys.argv[1:])
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')

    logger = setup_component_logging(log_level)['cli']
    if debug:
        logger.info("Debug logging enabled")
    if uri:
        logger.info(f"Using registry URI from command line: {uri}")
        use_registry_uri(uri)

    exit_code = 0
    try:
        if command:
            exit_code = run_once(shlex.join(command))
        else:
            repl_loop()
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        close_filesystem()
        logger.info("CLI exiting")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
