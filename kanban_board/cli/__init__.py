"""rk: command line client for the board server."""
