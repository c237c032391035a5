"""Entry point for running resource-accessor as a module.

This allows the package to be executed as:
    python -m resource_accessor

It delegates to the CLI main function.
"""

from resource_accessor.cli.main import main

if __name__ == "__main__":
    main()
