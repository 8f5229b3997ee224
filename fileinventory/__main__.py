"""
Allow running the package with: python -m fileinventory

Examples:
    python -m fileinventory                       # Scan, report, save
    python -m fileinventory --config nas.json     # Use a specific config
    python -m fileinventory config                # Show config location and settings
    python -m fileinventory config --init         # Create example config file
    python -m fileinventory config -c nas.json --init
"""

import argparse
import sys


def _config_command(argv: list[str]) -> int:
    from .errors import ConfigError
    from .user_config import get_user_config

    parser = argparse.ArgumentParser(
        prog='fileinventory config',
        description='Show or create the configuration file'
    )
    parser.add_argument('-c', '--config', help='Path to JSON config file')
    parser.add_argument('-i', '--init', action='store_true',
                        help='Create an example configuration file')
    args = parser.parse_args(argv)

    config = get_user_config(args.config)

    if args.init:
        if config.config_file_path.exists():
            print(f"✗ Configuration file already exists: {config.config_file_path}")
            return 1
        if config.create_example_config():
            print(f"✓ Created example configuration file at:")
            print(f"  {config.config_file_path}")
            print(f"\nEdit this file to list the directories to inventory.")
            return 0
        print(f"✗ Failed to create configuration file.")
        return 1

    print(f"Configuration file: {config.config_file_path}")
    if not config.config_file_path.exists():
        print(f"Status: ✗ Not found")
        print(f"\nRun 'python -m fileinventory config --init' to create one.")
        return 1

    try:
        print(f"Status: ✓ Found")
        print(f"\nCurrent settings:")
        print(f"  inventory_file: {config.inventory_file}")
        print(f"  workers: {config.workers}")
        print(f"  force: {config.force}")
        for root in config.roots:
            state = "enabled" if root.enabled else "disabled"
            print(f"  root: {root.directory} ({state}, {len(root.exclude)} exclude patterns)")
    except ConfigError as e:
        print(f"✗ Invalid configuration: {e}")
        return 1
    return 0


def main():
    if len(sys.argv) > 1 and sys.argv[1] == 'config':
        sys.exit(_config_command(sys.argv[2:]))

    from .cli import main as cli_main
    sys.exit(cli_main())


if __name__ == '__main__':
    main()
