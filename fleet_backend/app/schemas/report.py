"""
Report Pydantic schemas.

``ReportFilters`` is what the report dialog submits; ``ReportData`` is the
document model handed to the PDF renderer.
"""

from pydantic import BaseModel, Field, model_validator
from datetime import date
from enum import Enum
from typing import Optional, List


class ReportType(str, Enum):
    ANALYTICS = "analytics"
    FINANCE = "finance"


class ReportSections(BaseModel):
    summary: bool = True
    fuel_logs: bool = True
    maintenance_logs: bool = True
    vehicles: bool = True
    drivers: bool = True
    routes: bool = True
    monthly_trend: bool = True
    insights: bool = True


class ReportFilters(BaseModel):
    date_from: Optional[date] = Field(None, description="Inclusive start; omit for all time")
    date_to: Optional[date] = Field(None, description="Inclusive end; omit for all time")
    vehicle_types: List[str] = Field(default_factory=list, description="Empty means every type")
    include_sections: ReportSections = Field(default_factory=ReportSections)
    report_type: ReportType = ReportType.ANALYTICS

    @model_validator(mode="after")
    def check_range(self):
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("date_to must not be before date_from")
        return self


class SummaryMetric(BaseModel):
    label: str
    value: str
    subtext: Optional[str] = None


class SectionType(str, Enum):
    TABLE = "table"
    TEXT = "text"
    METRICS = "metrics"


class TableData(BaseModel):
    head: List[str]
    body: List[List[str]]


class LabelValue(BaseModel):
    label: str
    value: str


class ReportSection(BaseModel):
    title: str
    type: SectionType
    table: Optional[TableData] = None
    text: Optional[str] = None
    items: List[LabelValue] = Field(default_factory=list)


class ReportData(BaseModel):
    title: str
    generated_by: str
    date_range: Optional[str] = None
    summary: List[SummaryMetric] = Field(default_factory=list)
    sections: List[ReportSection] = Field(default_factory=list)
