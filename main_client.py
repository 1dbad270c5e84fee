#!/usr/bin/env python3
"""
Main entry point for the RCON command-line client.

Runs a single command given as arguments, a script read from a file or
stdin, or an interactive console. Connection settings come from environment
variables (see config/settings.py) and can be overridden with flags.
"""

import argparse
import os
import sys
from typing import List, Optional, TextIO

from client.rcon_client import RconClient
from config.settings import ClientConfig, Config
from utils.logging import setup_logging, get_logger
from utils.exceptions import ConfigurationError, RconError

logger = get_logger(__name__)

INTERACTIVE_PROMPT = ">>> "
INTERACTIVE_EXIT = "bye"


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="srcds-rcon",
        description="Send commands to a Source engine server over RCON.",
    )
    parser.add_argument(
        "-a", dest="address",
        help="address of the server RCON, in the format of HOST:PORT",
    )
    parser.add_argument("-p", dest="password", help="password of the RCON")
    parser.add_argument(
        "-t", dest="timeout", type=float,
        help="timeout of the connection (seconds)",
    )
    parser.add_argument(
        "-f", dest="from_file", metavar="FILE",
        help='read commands from FILE, "-" for stdin',
    )
    parser.add_argument(
        "-i", dest="interactive", action="store_true",
        help="interact with the console",
    )
    parser.add_argument("command", nargs="*", help="command to execute")
    return parser


class ClientApplication:
    """Main application class for the RCON command-line client."""

    def __init__(self, args: argparse.Namespace,
                 stdin: Optional[TextIO] = None,
                 stdout: Optional[TextIO] = None,
                 stderr: Optional[TextIO] = None):
        """Initialize application."""
        self.args = args
        self.config = Config()
        self.client: Optional[RconClient] = None
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def load_config(self) -> ClientConfig:
        """Load configuration from the environment and apply flag overrides."""
        client_config = self.config.load_client_config()
        if self.args.address is not None:
            client_config.address = self.args.address
        if self.args.password is not None:
            client_config.password = self.args.password
        if self.args.timeout is not None:
            client_config.timeout = self.args.timeout
        client_config.validate()

        logger.info(
            f"Configuration loaded: address={client_config.address}, "
            f"timeout={client_config.timeout}"
        )
        return client_config

    def run(self) -> int:
        """
        Run the client application.

        Returns:
            Process exit status
        """
        try:
            self.client = RconClient.from_config(self.load_config())
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=self.stderr)
            return 1

        with self.client:
            if self.args.interactive:
                return self.run_interactive()
            if self.args.from_file:
                return self.run_file(self.args.from_file)
            return self.run_args()

    def run_args(self) -> int:
        command = " ".join(self.args.command).strip()
        if not command:
            print("empty commands", file=self.stderr)
            return 1
        return self._execute(command)

    def run_file(self, filename: str) -> int:
        if filename == "-":
            script = self.stdin.read()
        else:
            try:
                with open(filename, "r", encoding="utf-8") as f:
                    script = f.read()
            except OSError as e:
                print(e, file=self.stderr)
                return 1
        return self._execute(script)

    def run_interactive(self) -> int:
        """Read commands line by line until EOF or the exit word."""
        while True:
            self.stdout.write(INTERACTIVE_PROMPT)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                break

            line = line.strip()
            if line == INTERACTIVE_EXIT:
                break
            if line:
                self._execute(line)
        return 0

    def _execute(self, command: str) -> int:
        try:
            output = self.client.execute(command)
        except RconError as e:
            print(e.output.strip(), file=self.stdout)
            print(e, file=self.stderr)
            return 1
        print(output.strip(), file=self.stdout)
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Get log level from environment
    log_level = os.getenv('LOG_LEVEL', 'WARNING')
    setup_logging(log_level)

    return ClientApplication(args).run()


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
