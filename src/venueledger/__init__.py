"""Venue booking and finance ledger."""

__version__ = "0.1.0"


# Import main lazily so importing the domain layer does not load the CLI
def __getattr__(name):
    if name == "main":
        from venueledger.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
