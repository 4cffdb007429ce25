# doubledict
# Bidirectional associative containers

"""
Double dictionaries: a primary key type and a secondary key type related
through two maps that are always kept in sync.

    OneToOneDict   — one primary <-> one secondary
    OneToManyDict  — one primary <-> many secondaries
    ManyToManyDict — many primaries <-> many secondaries
"""

import logging

from .base import DoubleDict
from .errors import (
    DesyncError,
    DoubleDictError,
    DuplicatePairError,
    InternalConsistencyError,
    KeyNotFoundError,
    PairNotFoundError,
    Side,
)
from .policies import Cardinality
from .variants import (
    ManyPrimaries,
    ManySecondaries,
    ManyToManyDict,
    OneToManyDict,
    OneToOneDict,
    create_double_dict,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "Cardinality",
    "DesyncError",
    "DoubleDict",
    "DoubleDictError",
    "DuplicatePairError",
    "InternalConsistencyError",
    "KeyNotFoundError",
    "ManyPrimaries",
    "ManySecondaries",
    "ManyToManyDict",
    "OneToManyDict",
    "OneToOneDict",
    "PairNotFoundError",
    "Side",
    "create_double_dict",
]
