"""
gatekeeper_driver.auth

Admin identity, admin session (cached token) and token acquisition.
"""
