"""Entry point for running hipay_professional as a module.

This allows the package to be executed as:
    python -m hipay_professional
"""

from hipay_professional.cli.main import cli

if __name__ == "__main__":
    cli()
