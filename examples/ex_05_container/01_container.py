"""Container: autowiring a chain of injectable services.

This module demonstrates:

1. ``container.get`` constructing a controller and its dependency chain.
2. The same instance returned on every later request.
3. ``route`` metadata recorded on the controller class.
4. Registration refused for classes without ``@injectable()``.
"""

from __future__ import annotations

import logging

from metawire import (
    ROUTE,
    Autowired,
    MetawireNotInjectableError,
    container,
    injectable,
    metadata_store,
    route,
)


@injectable()
class LogService:
    def log(self, message: str) -> str:
        return f"[LOG]: {message}"


@injectable()
class AuthService:
    log_service: LogService = Autowired()

    def authenticate(self, user: str, password: str) -> str:
        return self.log_service.log(f"Authenticating {user} with {password}")


@injectable()
class UserController:
    auth_service: AuthService = Autowired()

    @route("/login")
    def login(self, user: str, password: str) -> str:
        return self.auth_service.authenticate(user, password)


class Plain:
    pass


def main() -> None:
    # refused registrations are logged at WARNING
    logging.getLogger("metawire").setLevel(logging.ERROR)

    controller = container.get(UserController)
    print(controller.login("ada", "secret"))  # => [LOG]: Authenticating ada with secret

    same = container.get(UserController) is controller
    print(f"same_instance={same}")  # => same_instance=True
    shared = controller.auth_service.log_service is container.get(LogService)
    print(f"shared_log_service={shared}")  # => shared_log_service=True

    login_route = metadata_store.get(ROUTE, UserController)
    print(f"route={login_route.path} -> {login_route.method}")  # => route=/login -> login

    try:
        container.get(Plain)
    except MetawireNotInjectableError as error:
        print(error)  # => Class Plain is not injectable


if __name__ == "__main__":
    main()
