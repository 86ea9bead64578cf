"""
gatekeeper_driver.client

Gatekeeper client package.

Responsibilities:
- Provide the HTTP boundary, response decoding, the resilient admin retry
  protocol and the public `GatekeeperClient`.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Callers should depend on `GatekeeperClient` and `results`, not on `transport`.
