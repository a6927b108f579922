"""Allow ``python -m namespace_validator``."""

from namespace_validator.main import cli

if __name__ == "__main__":
    cli()
