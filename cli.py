#!/usr/bin/env python3
"""
================================================================================
CLI - Command Line Interface
================================================================================

Provides command-line access to the reading tracker:
    - Web server launcher (with nightly reset scheduler)
    - Family listing and per-member progress
    - Manual progress reset
    - Paths and effective configuration

Usage:
    python cli.py [command] [options]
    python cli.py --help

Examples:
    python cli.py web
    python cli.py families
    python cli.py status gueta
    python cli.py reset --family gueta

================================================================================
"""

import sys
import json
import argparse
from typing import Any

from src.core.errors import TrackerError
from src.utils import constants
from src.utils.config import load_config
from src.utils.logger import setup_logging
from src.web import server as web_server


# ANSI color codes
class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


def _pretty_json(payload: Any):
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def print_header(text):
    """Print formatted header"""
    print(f"\n{Colors.BOLD}{Colors.BLUE}{'=' * 70}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.CYAN}{text:^70}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.BLUE}{'=' * 70}{Colors.ENDC}\n")

def print_success(text):
    """Print success message"""
    print(f"{Colors.GREEN}✓{Colors.ENDC} {text}")

def print_error(text):
    """Print error message"""
    print(f"{Colors.RED}✗{Colors.ENDC} {text}")

def print_info(text):
    """Print info message"""
    print(f"{Colors.CYAN}ℹ{Colors.ENDC} {text}")


def _services(load_content=False):
    """Family store and tracker without seeding the built-in families"""
    return web_server.build_services(load_config(), load_content=load_content, seed=False)


def cmd_web(args):
    """Start the web server"""
    print_header("WEB SERVER")
    print_info("Press Ctrl+C to stop the server\n")
    return web_server.main() == 0


def cmd_families(args):
    """List registered families"""
    print_header("FAMILIES")
    families = _services().store.list_all()
    if not families:
        print_info("No families registered")
        return True

    for entry in families:
        print(f"  {Colors.BOLD}{entry['name']}{Colors.ENDC}  "
              f"{entry['memberCount']} members  (created {entry['createdAt']})")
    print_success(f"{len(families)} family(ies)")
    return True


def cmd_status(args):
    """Show per-member progress of one family"""
    print_header(f"STATUS: {args.family}")
    try:
        progress = _services().tracker.progress(args.family)
    except TrackerError as e:
        print_error(e.message)
        return False

    if args.json:
        _pretty_json(progress)
        return True

    for member, counts in progress.items():
        done = counts['completedCount'] == counts['totalCount']
        color = Colors.GREEN if done else Colors.YELLOW
        print(f"  {member:<20} {color}{counts['completedCount']}/{counts['totalCount']}{Colors.ENDC}")
    return True


def cmd_reset(args):
    """Reset completed parts for one family or all"""
    print_header("RESET PROGRESS")
    tracker = _services().tracker
    try:
        if args.family:
            tracker.reset_family(args.family)
            print_success(f"Completed parts reset for family {args.family}")
        else:
            tracker.reset_all()
            print_success("Completed parts reset for all families")
    except TrackerError as e:
        print_error(e.message)
        return False
    return True


def cmd_info(args):
    """Display paths and configuration"""
    print_header("SYSTEM INFORMATION")
    config = load_config()

    print(f"{Colors.BOLD}Paths:{Colors.ENDC}")
    print(f"  Base directory:  {constants.BASE_DIR}")
    print(f"  Config file:     {constants.CONFIG_FILE}")
    print(f"  Families file:   {config['general']['families_file']}")
    print(f"  Content file:    {config['general']['content_file']}")
    print(f"  Logs:            {constants.LOG_DIR}")

    print(f"\n{Colors.BOLD}Configuration:{Colors.ENDC}")
    _pretty_json(config)
    print_success("System information displayed")
    return True


def build_parser():
    parser = argparse.ArgumentParser(
        description='Family Reading Tracker - Command Line Interface',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    parser_web = subparsers.add_parser('web', help='Start the web server and nightly reset')
    parser_web.set_defaults(func=cmd_web)

    parser_families = subparsers.add_parser('families', help='List families')
    parser_families.set_defaults(func=cmd_families)

    parser_status = subparsers.add_parser('status', help='Show progress of a family')
    parser_status.add_argument('family', help='Family name')
    parser_status.add_argument('--json', action='store_true', help='Print raw JSON')
    parser_status.set_defaults(func=cmd_status)

    parser_reset = subparsers.add_parser('reset', help='Reset completed parts')
    parser_reset.add_argument('--family', help='Only this family (default: all)')
    parser_reset.set_defaults(func=cmd_reset)

    parser_info = subparsers.add_parser('info', help='Show paths and configuration')
    parser_info.set_defaults(func=cmd_info)

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # If no command specified, show help
    if not args.command:
        parser.print_help()
        return 0

    if args.command != 'web':
        setup_logging('cli', log_to_file=False)

    # Run command
    try:
        success = args.func(args)
        return 0 if success else 1
    except KeyboardInterrupt:
        print_info("\nOperation cancelled by user")
        return 130
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        return 1

if __name__ == '__main__':
    sys.exit(main())
