"""Reconciles rule configuration between CLI arguments and environment variables."""

from datetime import timedelta
from pathlib import Path

import structlog
from pydantic import ValidationError

from sprint_sync.configuration.env import Settings, settings
from sprint_sync.configuration.exceptions import HostSchemaMismatchError, RequiredConfigurationElementError
from sprint_sync.configuration.models import RuleConfig, RuleSchemaConfig, SprintResolutionPolicy
from sprint_sync.schemas.host import HostSchemaModel
from sprint_sync.utils.yaml import load_yaml_file

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def load_rule_schema(path: Path | None) -> RuleSchemaConfig:
    """Load the rule schema from a YAML file, or return the default schema if no path is given.

    Raises:
        FileNotFoundError: If the path does not exist.
        pydantic.ValidationError: If the file does not describe a valid rule schema.
    """
    if path is None:
        return RuleSchemaConfig()
    if not path.exists():
        raise FileNotFoundError(f"Rule schema file not found: {path.absolute()}")
    logger.info("Loading rule schema", path=str(path))
    return RuleSchemaConfig.model_validate(load_yaml_file(path) or {})


def reconcile_rule_configuration(
    cli_debug: bool | None = None,
    cli_board_name: str | None = None,
    cli_sprint_resolution_policy: str | None = None,
    cli_lookahead_days: int | None = None,
    cli_rule_schema_path: Path | None = None,
    env_settings: Settings = settings,
) -> RuleConfig:
    """Reconciles CLI arguments with environment settings. CLI arguments take precedence.

    Raises:
        RequiredConfigurationElementError: If a configuration element is missing or invalid.
    """
    debug = cli_debug if cli_debug is not None else env_settings.DEBUG

    board_name = cli_board_name or env_settings.BOARD_NAME
    if not board_name:
        raise RequiredConfigurationElementError(name="Board name", cli_name="board_name", env_name="BOARD_NAME")

    policy_value = cli_sprint_resolution_policy or env_settings.SPRINT_RESOLUTION_POLICY
    try:
        policy = SprintResolutionPolicy(policy_value)
    except ValueError as exc:
        raise RequiredConfigurationElementError(
            name="Sprint resolution policy", cli_name="policy", env_name="SPRINT_RESOLUTION_POLICY"
        ) from exc

    lookahead_days = cli_lookahead_days if cli_lookahead_days is not None else env_settings.LOOKAHEAD_DAYS
    if lookahead_days < 0:
        raise RequiredConfigurationElementError(name="Lookahead days", cli_name="lookahead_days", env_name="LOOKAHEAD_DAYS")

    rule_schema_path = cli_rule_schema_path or env_settings.RULE_SCHEMA_PATH
    try:
        rule_schema = load_rule_schema(rule_schema_path)
    except ValidationError as exc:
        raise RequiredConfigurationElementError(name="Rule schema", cli_name="rule_schema", env_name="RULE_SCHEMA_PATH") from exc

    logger.debug(
        "Reconciled rule configuration",
        board_name=board_name,
        sprint_resolution_policy=policy.value,
        lookahead_days=lookahead_days,
        rule_schema_path=str(rule_schema_path) if rule_schema_path else None,
    )
    return RuleConfig(
        debug=debug,
        board_name=board_name,
        sprint_resolution_policy=policy,
        lookahead=timedelta(days=lookahead_days),
        rule_schema=rule_schema,
    )


def validate_host_schema(rule_schema: RuleSchemaConfig, host_schema: HostSchemaModel) -> None:
    """Validates that the host schema provides every field and value the rule depends on.

    Args:
        rule_schema (RuleSchemaConfig): The host names the rule was configured with.
        host_schema (HostSchemaModel): The fields and values the host exposes.

    Raises:
        HostSchemaMismatchError: If any field or enumeration value is missing, listing all of them.
    """
    missing_elements: list[str] = []
    for field_name, value_names in rule_schema.required_elements().items():
        if not host_schema.has_field(field_name):
            missing_elements.append(f"field '{field_name}'")
            continue
        for value_name in value_names:
            if not host_schema.has_value(field_name, value_name):
                missing_elements.append(f"value '{value_name}' of field '{field_name}'")

    if missing_elements:
        logger.error("Host schema does not match rule schema", missing_elements=missing_elements)
        raise HostSchemaMismatchError(missing_elements)
    logger.debug("Host schema matches rule schema", fields=list(rule_schema.required_elements()))
