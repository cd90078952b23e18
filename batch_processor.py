"""
batch_processor.py
──────────────────
Runs several planning scenarios in one pass (e.g. the same campus at
different enrollments, or the same enrollment under different code
editions) and produces a comparison report and optional combined workbook.

Each scenario is an independent, side-effect-free calculation, so they
are evaluated in a thread pool.

Usage:
    from batch_processor import BatchProcessor, ScenarioSpec

    scenarios = [
        ScenarioSpec(name="Base",      campus_type="middle", students=900),
        ScenarioSpec(name="Growth",    campus_type="middle", students=1200),
        ScenarioSpec(name="IBC 2003",  campus_type="middle", students=900,
                     code_edition="2003"),
    ]
    report = BatchProcessor(project_name="North MS").run(scenarios, output_excel="north_ms.xlsx")
    print(report.summary())
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Callable

from excel_exporter import export_batch_to_excel
from parameters import (
    clamp_class_size, clamp_gross_factor, parse_advanced, parse_enrollment, parse_flag,
)
from space_calculator import CalculationResult, SpaceProgramCalculator
from space_standards import CampusType, as_edition

logger = logging.getLogger(__name__)


def _text(value) -> str:
    """Enum members by value, anything else as stripped text."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value).strip()


# ─── Scenario specification ───────────────────────────────────────────────────

@dataclass
class ScenarioSpec:
    """
    One set of calculator inputs. Numeric fields are parsed leniently
    (see parameters.py); enum fields must be valid values.

    Args:
        name:              Label used in the comparison report.
        campus_type:       elementary | middle | high
        students:          Enrollment (max instructional capacity).
        flexibility_level: L1 – L4.
        class_size:        None → campus default; clamped to [1, campus max].
        advanced:          Loose dict of advanced parameters (camelCase or snake_case).
        compliance_method: quantitative | qualitative
        cafeteria_credit:  Opt-in to the qualitative cafeteria credit.
        code_edition:      2003 | 2012 | 2015 | 2018 | 2021 | 2024
        gross_factor:      Optional net-to-gross override, clamped to [1.1, 1.7].
    """
    name:              str
    campus_type:       str   = "elementary"
    students:          int   = 0
    flexibility_level: str   = "L2"
    class_size:        Optional[int] = None
    advanced:          dict  = field(default_factory=dict)
    compliance_method: str   = "quantitative"
    cafeteria_credit:  bool  = False
    code_edition:      str   = "2021"
    gross_factor:      Optional[float] = None

    @classmethod
    def from_dict(cls, d: dict, index: int = 0) -> "ScenarioSpec":
        return cls(
            name=str(d.get("name") or f"Scenario {index + 1}"),
            campus_type=d.get("campus_type", "elementary"),
            students=d.get("students", 0),
            flexibility_level=d.get("flexibility_level", "L2"),
            class_size=d.get("class_size"),
            advanced=d.get("advanced") or {},
            compliance_method=d.get("compliance_method", "quantitative"),
            cafeteria_credit=parse_flag(d.get("cafeteria_credit", False)),
            code_edition=d.get("code_edition", "2021"),
            gross_factor=d.get("gross_factor"),
        )

    def build_calculator(self) -> SpaceProgramCalculator:
        campus = CampusType(_text(self.campus_type).lower())
        return SpaceProgramCalculator(
            campus_type=campus,
            flexibility_level=_text(self.flexibility_level).upper(),
            class_size=clamp_class_size(campus, self.class_size),
            advanced=parse_advanced(campus, self.advanced),
            compliance_method=_text(self.compliance_method).lower(),
            cafeteria_credit=parse_flag(self.cafeteria_credit),
            code_edition=as_edition(self.code_edition),
            gross_factor_override=clamp_gross_factor(self.gross_factor),
        )


# ─── Per-scenario result ──────────────────────────────────────────────────────

@dataclass
class ScenarioResult:
    spec:    ScenarioSpec
    result:  Optional[CalculationResult]
    success: bool
    error:   str = ""


# ─── Batch report ─────────────────────────────────────────────────────────────

@dataclass
class BatchReport:
    scenario_results: list[ScenarioResult]
    excel_path:       Optional[str]
    project_name:     str

    @property
    def scenarios_ok(self)     -> int: return sum(1 for r in self.scenario_results if r.success)
    @property
    def scenarios_failed(self) -> int: return sum(1 for r in self.scenario_results if not r.success)
    @property
    def total_scenarios(self)  -> int: return len(self.scenario_results)

    def successful(self) -> list[tuple[str, CalculationResult]]:
        return [(r.spec.name, r.result) for r in self.scenario_results if r.success]

    def summary(self) -> str:
        lines = [
            "═" * 72,
            f"  SCENARIO BATCH — {self.project_name}",
            "═" * 72,
            f"  Scenarios run    : {self.scenarios_ok} / {self.total_scenarios}",
        ]
        if self.scenarios_failed:
            lines.append(f"  Scenarios failed : {self.scenarios_failed}")
        if self.excel_path:
            lines.append(f"  Excel output     : {self.excel_path}")
        lines.append("─" * 72)

        for sr in self.scenario_results:
            nm = sr.spec.name[:20]
            if sr.success:
                r = sr.result
                flag = "✅" if r.meets_aggregate else "⚠️ "
                lines.append(
                    f"  {nm:<20}  {r.students:>5,} st.  "
                    f"net {r.net_sf:>8,} SF  gross {r.gross_sf:>8,} SF  {flag}"
                )
            else:
                lines.append(f"  {nm:<20}  ❌ {sr.error or 'calculation failed'}")

        lines.append("═" * 72)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "project_name":     self.project_name,
            "scenarios_total":  self.total_scenarios,
            "scenarios_ok":     self.scenarios_ok,
            "scenarios_failed": self.scenarios_failed,
            "excel_path":       self.excel_path,
            "comparison": [
                {
                    "name":                   name,
                    "campus_type":            r.campus_type.value,
                    "students":               r.students,
                    "code_edition":           r.code_edition.value,
                    "total_instructional_sf": r.total_instructional_sf,
                    "aggregate_sf":           r.aggregate_sf,
                    "meets_aggregate":        r.meets_aggregate,
                    "net_sf":                 r.net_sf,
                    "gross_sf":               r.gross_sf,
                }
                for name, r in self.successful()
            ],
            "scenario_results": [
                {
                    "name":    sr.spec.name,
                    "success": sr.success,
                    "error":   sr.error,
                    "result":  sr.result.to_dict() if sr.result else None,
                }
                for sr in self.scenario_results
            ],
        }


# ─── BatchProcessor ───────────────────────────────────────────────────────────

class BatchProcessor:
    """
    Orchestrates a multi-scenario comparison.

    Steps:
      1. Build a calculator per scenario (input parsing / clamping)
      2. Calculate scenarios in parallel
      3. Optional combined Excel export
    """

    def __init__(
        self,
        project_name: str                = "School Space Program",
        max_workers:  int                = 4,
        on_progress:  Optional[Callable] = None,
    ):
        """
        Args:
            project_name: Used in report and Excel headers.
            max_workers:  Parallel calculation threads.
            on_progress:  Callback(scenario_name, status, detail).
        """
        self.project_name = project_name
        self.max_workers  = max_workers
        self.on_progress  = on_progress or (lambda *a: None)

    def _run_one(self, spec: ScenarioSpec) -> ScenarioResult:
        try:
            self.on_progress(spec.name, "calculating", f"{spec.campus_type} N={spec.students}")
            calc   = spec.build_calculator()
            result = calc.calculate(parse_enrollment(spec.students))
            self.on_progress(spec.name, "done", f"{result.gross_sf:,} SF gross")
            return ScenarioResult(spec=spec, result=result, success=True)
        except Exception as e:
            logger.error(f"Scenario '{spec.name}' failed: {e}", exc_info=True)
            self.on_progress(spec.name, "error", str(e))
            return ScenarioResult(spec=spec, result=None, success=False, error=str(e))

    def run(
        self,
        scenarios:    list[ScenarioSpec],
        output_excel: Optional[str] = None,
        fail_fast:    bool          = False,
    ) -> BatchReport:
        """
        Calculate all scenarios and return a BatchReport in input order.

        Args:
            scenarios:    List of ScenarioSpec objects.
            output_excel: If set, save a combined workbook to this path.
            fail_fast:    If True, abort on the first failed scenario.
        """
        if not scenarios:
            raise ValueError("No scenarios provided.")

        logger.info(f"Starting batch: {len(scenarios)} scenario(s), project='{self.project_name}'")

        results: list[ScenarioResult] = [None] * len(scenarios)
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            future_to_idx = {
                pool.submit(self._run_one, spec): i
                for i, spec in enumerate(scenarios)
            }
            for future in as_completed(future_to_idx):
                idx = future_to_idx[future]
                sr  = future.result()
                results[idx] = sr

                if fail_fast and not sr.success:
                    pool.shutdown(wait=False, cancel_futures=True)
                    raise RuntimeError(
                        f"Aborting batch: scenario '{sr.spec.name}' failed — {sr.error}"
                    )

        report = BatchReport(scenario_results=results, excel_path=None,
                             project_name=self.project_name)

        if output_excel and report.scenarios_ok:
            try:
                export_batch_to_excel(report.successful(), output_excel,
                                      project_name=self.project_name)
                report.excel_path = str(output_excel)
                logger.info(f"Excel saved: {report.excel_path}")
            except Exception as e:
                logger.error(f"Excel export failed: {e}", exc_info=True)

        return report
