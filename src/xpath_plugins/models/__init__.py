"""Data models for xpath-plugins.

This module provides the configuration node contract the predicates consume,
plus pydantic models for filters, per-call records and function registration.
"""

from xpath_plugins.models.filter import WILDCARD, XFilter, get_filter
from xpath_plugins.models.node import ConfigNode
from xpath_plugins.models.registration import CustomFunctionInfo, DatumType
from xpath_plugins.models.request import EvaluationRequest
from xpath_plugins.models.vif import VifData

__all__ = [
    # filter
    "WILDCARD",
    "XFilter",
    "get_filter",
    # node
    "ConfigNode",
    # registration
    "CustomFunctionInfo",
    "DatumType",
    # request
    "EvaluationRequest",
    # vif
    "VifData",
]
