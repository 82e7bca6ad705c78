"""
Runtime telemetry models.

Production telemetry arrives as camelCase JSON. Models accept both the wire
names and the Python field names and are immutable once validated.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RuntimeModel(BaseModel):
    """Base for telemetry models (camelCase aliases, frozen)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class EntrypointData(RuntimeModel):
    """Aggregated timings of one entrypoint that reaches a method."""

    entrypoint_name: str
    avg_cpu_time: float = Field(default=0, ge=0)
    avg_db_time: float = Field(default=0, ge=0)
    sum_cpu_time: float = Field(default=0, ge=0)
    sum_db_time: float = Field(default=0, ge=0)


class MethodRuntimeData(RuntimeModel):
    """CPU-time telemetry keyed by method name."""

    method_name: str
    entrypoints: List[EntrypointData] = Field(default_factory=list)


class SOQLRuntimeData(RuntimeModel):
    """
    Occurrence telemetry for one query.

    ``unique_query_identifier`` has the form ``<ClassName>.<ext>.<line>``.
    """

    unique_query_identifier: str
    representative_count: int = Field(default=0, ge=0)
    total_query_execution_time: float = Field(default=0, ge=0)


class ClassRuntimeData(RuntimeModel):
    """All telemetry recorded for one class."""

    methods: List[MethodRuntimeData] = Field(default_factory=list)
    soql_runtime_data: List[SOQLRuntimeData] = Field(default_factory=list)

    def find_method(self, method_name: str) -> Optional[MethodRuntimeData]:
        """Case-insensitive method lookup."""
        lowered = method_name.lower()
        return next((m for m in self.methods if m.method_name.lower() == lowered), None)


class RuntimeReportStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class RuntimeReport(RuntimeModel):
    """Telemetry response covering several classes."""

    status: RuntimeReportStatus
    message: str = ""
    class_data: Dict[str, ClassRuntimeData] = Field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == RuntimeReportStatus.SUCCESS

    def get_class_data(self, class_name: str) -> Optional[ClassRuntimeData]:
        """Telemetry of one class (exact name first, then case-insensitive)."""
        if not self.is_success:
            return None
        if class_name in self.class_data:
            return self.class_data[class_name]
        lowered = class_name.lower()
        return next((data for name, data in self.class_data.items() if name.lower() == lowered), None)
