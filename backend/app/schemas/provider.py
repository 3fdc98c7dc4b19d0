from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar, Union

T = TypeVar("T")

FailureKind = Literal[
    "missing_key",
    "http_error",
    "transport",
    "parse",
    "api_error",
    "api_information",
    "api_note",
]


class Selector(str, enum.Enum):
    GLOBAL_QUOTE = "GLOBAL_QUOTE"
    MARKET_STATUS = "MARKET_STATUS"
    TOP_GAINERS_LOSERS = "TOP_GAINERS_LOSERS"
    OVERVIEW = "OVERVIEW"


@dataclass(frozen=True)
class QueryRequest:
    selector: Selector
    arguments: Mapping[str, str] = field(default_factory=dict)

    def to_params(self, api_key: str) -> dict[str, str]:
        params = dict(self.arguments)
        params["function"] = self.selector.value
        params["apikey"] = api_key
        return params


@dataclass(frozen=True)
class Success(Generic[T]):
    payload: T


@dataclass(frozen=True)
class Failure:
    message: str
    kind: FailureKind = "api_error"


Result = Union[Success[T], Failure]
