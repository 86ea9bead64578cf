"""
gatekeeper_driver.__main__

Entrypoint for `python -m gatekeeper_driver [config-file]`.

Responsibilities:
- Load settings (environment plus an optional dotenv-style file).
- Configure structured logging.
- Run a short demonstration sequence against the configured Gatekeeper.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from gatekeeper_driver.client.gatekeeper import GatekeeperClient
from gatekeeper_driver.client.results import Success
from gatekeeper_driver.errors import ConfigurationInvalid
from gatekeeper_driver.observability.logging import configure_logging, get_logger
from gatekeeper_driver.settings import GatekeeperSettings, load_settings

log = get_logger("gatekeeper_driver.main")


def run_demo(client: GatekeeperClient, settings: GatekeeperSettings) -> None:
    users = client.list_users()
    if isinstance(users, Success):
        log.info("demo.user_list", count=len(users.value))
        for user in users.value:
            log.info("demo.user", username=user.username, user_id=user.user_id)
    else:
        log.warning("demo.user_list_failed", result=repr(users))

    services = client.list_services()
    if isinstance(services, Success):
        log.info("demo.service_list", count=len(services.value))
        for service in services.value:
            log.info("demo.service", short_name=service.short_name, service_key=service.service_key)
    else:
        log.warning("demo.service_list_failed", result=repr(services))

    if settings.demo_user_id is not None and settings.demo_password is not None:
        auth = client.simple_authentication(settings.demo_user_id, settings.demo_password)
        if auth.ok:
            log.info("demo.authentication_succeeded", user_id=settings.demo_user_id)
        else:
            log.warning("demo.authentication_failed", user_id=settings.demo_user_id, result=repr(auth))


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    env_file = args[-1] if args else None

    try:
        settings = load_settings(env_file)
        configure_logging(
            service_name=settings.service_name,
            level=settings.log_level,
            log_file=settings.log_file,
            file_level=settings.log_file_level,
        )
        client = GatekeeperClient.from_settings(settings)
    except ConfigurationInvalid as e:
        log.critical("gatekeeper.configuration_invalid", error=str(e))
        return 2

    log.debug("gatekeeper.driver_loaded", base_url=settings.base_url)
    with client:
        run_demo(client, settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
