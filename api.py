"""
api.py
──────
Flask REST API for the School Space Program Calculator.
Connects parameters → space_calculator → excel_exporter / batch_processor.

Endpoints:
  POST /api/calculate             JSON inputs → space program
  POST /api/calculate/batch       Several scenarios + comparison
  GET  /api/download/<id>         Download a generated Excel workbook
  GET  /api/standards             Campus standards and IBC edition profiles
  GET  /api/defaults/<campus>     Default class size and advanced parameters
  GET  /api/health                Health check

Run locally:
  python api.py

Environment variables:
  PORT                 (default 5000)
  OUTPUT_FOLDER        (default ./outputs)
  FRONTEND_ORIGIN      (default *)
  MAX_BATCH_SCENARIOS  (default 50)
  BATCH_WORKERS        (default 4)
"""

from __future__ import annotations

import os
import uuid
import logging
import traceback
from pathlib import Path
from datetime import datetime, timezone

from flask import Flask, request, jsonify, send_file, abort

from space_standards import (
    CAMPUS_STANDARDS, CODE_PROFILES, FLEXIBILITY_DESCRIPTIONS,
    CampusType, CodeEdition, ComplianceMethod, FlexibilityLevel,
)
from parameters import (
    clamp_class_size, clamp_gross_factor, default_advanced,
    parse_advanced, parse_enrollment, parse_flag,
)
from space_calculator import SpaceProgramCalculator, DISCLAIMER
from excel_exporter import export_to_excel, export_batch_to_excel
from batch_processor import BatchProcessor, ScenarioSpec

# ── App setup ─────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)

API_VERSION = "1.0.0"


# ── CORS ──────────────────────────────────────────────────────────────────────
FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "*")

@app.after_request
def add_cors_headers(response):
    response.headers["Access-Control-Allow-Origin"]  = FRONTEND_ORIGIN
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    return response

@app.route("/", defaults={"path": ""}, methods=["OPTIONS"])
@app.route("/<path:path>", methods=["OPTIONS"])
def handle_preflight(path):
    return "", 204

OUTPUT_FOLDER       = Path(os.getenv("OUTPUT_FOLDER", "./outputs"))
MAX_BATCH_SCENARIOS = int(os.getenv("MAX_BATCH_SCENARIOS", 50))
BATCH_WORKERS       = int(os.getenv("BATCH_WORKERS", 4))

OUTPUT_FOLDER.mkdir(parents=True, exist_ok=True)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _err(message: str, status: int = 400) -> tuple:
    return jsonify({"success": False, "error": message}), status


def _parse_enum(enum_cls, raw, field_name: str):
    try:
        return enum_cls(str(raw).strip())
    except ValueError:
        valid = [e.value for e in enum_cls]
        raise ValueError(f"Invalid {field_name} '{raw}'. Must be one of: {valid}")


def _calculator_from_body(body: dict) -> SpaceProgramCalculator:
    """Enum fields are strict (400 on bad values); numbers are clamped."""
    campus = _parse_enum(CampusType, str(body.get("campus_type", "elementary")).lower(), "campus_type")
    return SpaceProgramCalculator(
        campus_type=campus,
        flexibility_level=_parse_enum(FlexibilityLevel, str(body.get("flexibility_level", "L2")).upper(),
                                      "flexibility_level"),
        class_size=clamp_class_size(campus, body.get("class_size")),
        advanced=parse_advanced(campus, body.get("advanced") or {}),
        compliance_method=_parse_enum(ComplianceMethod,
                                      str(body.get("compliance_method", "quantitative")).lower(),
                                      "compliance_method"),
        cafeteria_credit=parse_flag(body.get("cafeteria_credit", False)),
        code_edition=_parse_enum(CodeEdition, body.get("code_edition", "2021"), "code_edition"),
        gross_factor_override=clamp_gross_factor(body.get("gross_factor")),
    )


def _export(write, *args, **kwargs) -> str | None:
    """Write a workbook under OUTPUT_FOLDER; returns the download id or None."""
    try:
        dl_id   = str(uuid.uuid4())
        xl_path = OUTPUT_FOLDER / f"{dl_id}.xlsx"
        write(*args, str(xl_path), **kwargs)
        logger.info(f"Excel saved: {xl_path.name}")
        return dl_id
    except Exception as e:
        logger.warning(f"Excel export failed (result still returned): {e}")
        return None


# ── Routes ────────────────────────────────────────────────────────────────────

@app.get("/api/health")
def health():
    """Simple health check."""
    return jsonify({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "version": API_VERSION,
        "supported_campus_types": [c.value for c in CampusType],
        "supported_code_editions": [e.value for e in CodeEdition],
    })


@app.get("/api/standards")
def list_standards():
    """Return the campus standards and IBC edition tables."""
    campuses = []
    for ct, std in CAMPUS_STANDARDS.items():
        campuses.append({
            "campus_type":            ct.value,
            "label":                  std.label,
            "default_class_size":     std.default_class_size,
            "max_class_size":         std.max_class_size,
            "science_max_class_size": std.science_max_class_size,
            "sf_per_student":         {lvl.value: sf for lvl, sf in std.sf_per_student.items()},
            "gym_sf":                 std.gym_sf,
            "science_sf":             {"combo": std.science_sf.combo,
                                       "separate_lab": std.science_sf.separate_lab},
            "staff_ratio":            std.staff_ratio,
            "support_sf_per_student": {
                "admin":        std.support.admin,
                "teacher_work": std.support.teacher_work,
                "cafeteria":    std.support.cafeteria,
                "custodial":    std.support.custodial,
                "mechanical":   std.support.mechanical,
            },
            "net_to_gross":           std.net_to_gross,
        })
    editions = [
        {
            "edition":                   ed.value,
            "label":                     p.label,
            "note":                      p.note,
            "gender_neutral_provisions": p.gender_neutral_provisions,
            "single_user_contribute":    p.single_user_contribute,
            "separate_facilities_threshold": p.separate_facilities_threshold,
            "urinal_sub_max":            p.urinal_sub_max,
            "df_exempt_threshold":       p.df_exempt_threshold,
        }
        for ed, p in CODE_PROFILES.items()
    ]
    flex = [{"id": lvl.value, "description": desc} for lvl, desc in FLEXIBILITY_DESCRIPTIONS.items()]
    return jsonify({"success": True, "campus_standards": campuses,
                    "code_editions": editions, "flexibility_levels": flex})


@app.get("/api/defaults/<campus_type>")
def campus_defaults(campus_type: str):
    """Default class size and advanced parameters for a campus type."""
    try:
        campus = _parse_enum(CampusType, campus_type.lower(), "campus_type")
    except ValueError as e:
        return _err(str(e))
    std = CAMPUS_STANDARDS[campus]
    return jsonify({
        "success":            True,
        "campus_type":        campus.value,
        "default_class_size": std.default_class_size,
        "max_class_size":     std.max_class_size,
        "net_to_gross":       std.net_to_gross,
        "advanced":           default_advanced(campus).to_dict(),
    })


@app.post("/api/calculate")
def calculate():
    """
    Calculate a space program from JSON inputs.

    JSON body:
    {
      "campus_type":       "elementary",      // elementary | middle | high
      "students":          750,
      "flexibility_level": "L2",              // L1 – L4
      "class_size":        22,                // optional, clamped to campus max
      "advanced":          {"utilization": 0.85, "science_config": "combo"},
      "compliance_method": "quantitative",    // or qualitative
      "cafeteria_credit":  false,
      "code_edition":      "2021",
      "gross_factor":      1.35,              // optional, clamped to [1.1, 1.7]
      "project_name":      "Lakeside ES",
      "export_excel":      false
    }
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return _err("JSON body is required.")

    project_name = body.get("project_name", "School Space Program")
    export_excel = bool(body.get("export_excel", False))

    try:
        calc = _calculator_from_body(body)
    except ValueError as e:
        return _err(str(e))

    students = parse_enrollment(body.get("students", 0))
    try:
        result = calc.calculate(students)
    except Exception as e:
        logger.error(traceback.format_exc())
        return _err(f"Calculation failed: {e}", 500)

    logger.info(
        f"Calculated {result.campus_type.value} N={students} "
        f"IBC {result.code_edition.value}: gross={result.gross_sf} SF"
    )

    download_id = _export(export_to_excel, result, project_name=project_name) if export_excel else None

    out = result.to_dict()
    out["success"]      = True
    out["project_name"] = project_name
    out["disclaimer"]   = DISCLAIMER
    if download_id:
        out["download_id"]  = download_id
        out["download_url"] = f"/api/download/{download_id}"
    return jsonify(out), 200


@app.post("/api/calculate/batch")
def calculate_batch():
    """
    Calculate several scenarios in one request.

    JSON body:
    {
      "project_name": "North MS",
      "export_excel": true,
      "scenarios": [
        {"name": "Base",   "campus_type": "middle", "students": 900},
        {"name": "Growth", "campus_type": "middle", "students": 1200}
      ]
    }
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict) or not isinstance(body.get("scenarios"), list):
        return _err("JSON body with 'scenarios' array is required.")

    raw = body["scenarios"]
    if not raw:
        return _err("Scenarios array is empty.")
    if len(raw) > MAX_BATCH_SCENARIOS:
        return _err(f"Too many scenarios ({len(raw)}). Maximum is {MAX_BATCH_SCENARIOS}.")

    project_name = body.get("project_name", "School Space Program")
    export_excel = bool(body.get("export_excel", False))

    try:
        specs = [ScenarioSpec.from_dict(d, i) for i, d in enumerate(raw)]
    except (TypeError, AttributeError) as e:
        return _err(f"Invalid scenario data: {e}")

    processor = BatchProcessor(project_name=project_name, max_workers=BATCH_WORKERS)
    try:
        report = processor.run(specs)
    except Exception as e:
        logger.error(traceback.format_exc())
        return _err(f"Batch calculation failed: {e}", 500)

    download_id = None
    if export_excel and report.scenarios_ok:
        download_id = _export(export_batch_to_excel, report.successful(), project_name=project_name)

    out = report.to_dict()
    out["success"]    = True
    out["disclaimer"] = DISCLAIMER
    if download_id:
        out["download_id"]  = download_id
        out["download_url"] = f"/api/download/{download_id}"
    return jsonify(out), 200


@app.get("/api/download/<download_id>")
def download(download_id: str):
    """
    Download a previously generated Excel workbook.
    Files are kept for the lifetime of the server process.
    """
    # Sanitise ID — must be a UUID
    try:
        uuid.UUID(download_id)
    except ValueError:
        abort(400)

    xl_path = OUTPUT_FOLDER / f"{download_id}.xlsx"
    if not xl_path.exists():
        return _err("File not found.", 404)

    return send_file(
        str(xl_path.resolve()),
        as_attachment=True,
        download_name="space_program.xlsx",
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


# ── Error handlers ────────────────────────────────────────────────────────────

@app.errorhandler(400)
def bad_request(e):
    return _err("Bad request.", 400)

@app.errorhandler(404)
def not_found(e):
    return _err("Endpoint not found.", 404)

@app.errorhandler(405)
def method_not_allowed(e):
    return _err("Method not allowed.", 405)


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    port = int(os.getenv("PORT", 5000))
    logger.info(f"Starting School Space Program API on port {port}")
    app.run(host="0.0.0.0", port=port, debug=False)
