"""
Records component - generic entity list manager.
"""

from .component import EntityManager, describe_validation_error
from .models import AfterWrite, MutationOutput, ReloadOutput, SortOrder, WritePolicy
from .ports import EntityGatewayPort, RemoteGateway

__all__ = [
    "EntityManager",
    "describe_validation_error",
    "AfterWrite",
    "WritePolicy",
    "SortOrder",
    "ReloadOutput",
    "MutationOutput",
    "EntityGatewayPort",
    "RemoteGateway",
]
