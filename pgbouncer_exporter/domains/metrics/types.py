"""Types for the metric descriptor registry."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict


class MetricKind(str, Enum):
    """Exposition kind of a metric."""

    gauge = "gauge"
    counter = "counter"


class MetricDescriptor(BaseModel):
    """Static metadata for one exposed metric.

    The label arity is fixed here: every sample bound to the descriptor
    carries exactly ``len(label_names)`` label values.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    help: str
    kind: MetricKind
    label_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class Sample:
    """One observation of a descriptor, valid for a single scrape pass."""

    descriptor: MetricDescriptor
    value: float
    label_values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.label_values) != len(self.descriptor.label_names):
            raise ValueError(
                f"metric '{self.descriptor.name}' takes labels "
                f"{list(self.descriptor.label_names)}, got {list(self.label_values)}"
            )

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def labels(self) -> dict[str, str]:
        """Label names zipped with their bound values."""
        return dict(zip(self.descriptor.label_names, self.label_values))
