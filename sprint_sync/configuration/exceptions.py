"""Contains exceptions raised when reconciling application configuration."""


class HostSchemaMismatchError(Exception):
    """Raised when the host schema lacks fields or values the rule depends on."""

    def __init__(self, missing_elements: list[str]) -> None:
        """Initializes the exception with every missing schema element."""
        super().__init__("Host schema does not match rule schema - missing " + ", ".join(missing_elements))
        self.missing_elements = missing_elements


class RequiredConfigurationElementError(Exception):
    """Raised when a required configuration element is missing or invalid."""

    def __init__(self, name: str, cli_name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(f"Missing or invalid required configuration element: {name} (command line option {cli_name}, environment variable {env_name})")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name
