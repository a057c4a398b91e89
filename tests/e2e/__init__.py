"""
End-to-end tests package.

Contains end-to-end tests that exercise the client against the live HiPay
stage platform. They are skipped unless the integration environment
variables are defined.
"""
