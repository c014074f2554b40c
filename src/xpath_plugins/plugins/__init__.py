"""Custom XPath function plugins.

Each plugin module publishes a REGISTRATION_DATA table describing its
functions. This module combines them and provides the lookup and
type-checked invocation used by an evaluation engine.
"""

import logging
from typing import Any

from xpath_plugins.errors import UnknownFunctionError
from xpath_plugins.models import CustomFunctionInfo
from xpath_plugins.plugins import interface_leafref, qos_profile, siad_link_speed, vif_interface
from xpath_plugins.plugins.interface_leafref import (
    is_interface_leafref,
    is_interface_leafref_original,
    is_l3_interface_leafref,
)
from xpath_plugins.plugins.qos_profile import (
    verify_dscp_group_to_queue_mappings,
    verify_queue_id_and_traffic_class,
)
from xpath_plugins.plugins.siad_link_speed import verify_siad_link_speed
from xpath_plugins.plugins.vif_interface import (
    check_implicit_vlan_id_unique,
    check_vlan_values_do_not_conflict,
    parent_interface_string_length,
    validate_vif_vlan_settings,
)

logger = logging.getLogger(__name__)

REGISTRATION_DATA: list[CustomFunctionInfo] = [
    *interface_leafref.REGISTRATION_DATA,
    *qos_profile.REGISTRATION_DATA,
    *siad_link_speed.REGISTRATION_DATA,
    *vif_interface.REGISTRATION_DATA,
]

_FUNCTIONS_BY_NAME: dict[str, CustomFunctionInfo] = {
    info.name: info for info in REGISTRATION_DATA
}


def get_function_info(name: str) -> CustomFunctionInfo:
    """Look up a registered custom function.

    Args:
        name: Function name as used in XPath expressions

    Returns:
        The function's registration entry

    Raises:
        UnknownFunctionError: If no function has this name
    """
    try:
        return _FUNCTIONS_BY_NAME[name]
    except KeyError:
        raise UnknownFunctionError(name) from None


def call_function(name: str, *args: Any) -> Any:
    """Invoke a registered custom function with type-checked arguments.

    If the arguments don't match the registered signature the function
    cannot be invoked, and its registered default is returned instead.

    Args:
        name: Function name as used in XPath expressions
        *args: Function arguments, in signature order

    Returns:
        The function's result, or its default if invocation is impossible

    Raises:
        UnknownFunctionError: If no function has this name
    """
    info = get_function_info(name)

    if len(args) != len(info.args):
        logger.warning(
            "%s: expected %d argument(s), got %d; returning default %r",
            name,
            len(info.args),
            len(args),
            info.default,
        )
        return info.default

    for position, (arg_type, arg) in enumerate(zip(info.args, args, strict=True), start=1):
        if not arg_type.accepts(arg):
            logger.warning(
                "%s: argument %d is not a %s; returning default %r",
                name,
                position,
                arg_type.value,
                info.default,
            )
            return info.default

    return info.fn(*args)


__all__ = [
    "REGISTRATION_DATA",
    "call_function",
    "check_implicit_vlan_id_unique",
    "check_vlan_values_do_not_conflict",
    "get_function_info",
    "is_interface_leafref",
    "is_interface_leafref_original",
    "is_l3_interface_leafref",
    "parent_interface_string_length",
    "validate_vif_vlan_settings",
    "verify_dscp_group_to_queue_mappings",
    "verify_queue_id_and_traffic_class",
    "verify_siad_link_speed",
]
