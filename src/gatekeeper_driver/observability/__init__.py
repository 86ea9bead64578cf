"""
gatekeeper_driver.observability

Logging setup shared by the driver and its CLI.
"""
