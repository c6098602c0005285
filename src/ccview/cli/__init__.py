"""ccview command line interface."""
