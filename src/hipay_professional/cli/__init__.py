"""Command line interface for the HiPay Professional SDK."""
