"""Enable running as: python -m horizon_data

Usage:
    python -m horizon_data --help
    python -m horizon_data exchanges.total
    python -m horizon_data exchanges.grouped -t weeks -n 4 -j
"""

from horizon_data.cli.main import cli

if __name__ == "__main__":
    cli()
