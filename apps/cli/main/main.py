from __future__ import annotations

import logging
import sys

from apps.cli.commands.generate_master_key import GenerateMasterKeyCli
from apps.cli.commands.purge_expired import PurgeExpiredCli

_USAGE = (
    "Usage:\n"
    "  generate-master-key [--format raw|env]\n"
    "  purge-expired [--timeout-seconds N] [--report-format text|json]\n"
)


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    _configure_logging()
    args = argv if argv is not None else sys.argv[1:]

    if not args:
        print(_USAGE)
        return 2

    cmd = args[0]
    rest = args[1:]

    if cmd == "generate-master-key":
        return GenerateMasterKeyCli().run(rest)
    if cmd == "purge-expired":
        return PurgeExpiredCli().run(rest)

    print(f"unknown command: {cmd}\n\n{_USAGE}")
    return 2


def keygen_main(argv: list[str] | None = None) -> int:
    """
    Shortcut entrypoint for `burnlink-keygen` console script.

    Args:
        argv: Optional arguments for `generate-master-key` without program name.
    Returns:
        int: Process exit code.
    Assumptions:
        Arguments are forwarded unchanged.
    Raises:
        SystemExit: Propagated by argparse on invalid arguments.
    Side Effects:
        Prints generated key to stdout.
    """
    args = argv if argv is not None else sys.argv[1:]
    return GenerateMasterKeyCli().run(args)


if __name__ == "__main__":
    raise SystemExit(main())
