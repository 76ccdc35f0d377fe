from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.http import current_identity, handle_domain_errors, manager_required
from ..core.exceptions import ValidationError
from ..container import Container
from .export import export_filename, hours_comparison_csv, hours_comparison_xlsx

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/analytics/hours-comparison", methods=["GET"], endpoint="analytics_hours_comparison")
    @manager_required
    @handle_domain_errors
    def analytics_hours_comparison():
        _, org_id = current_identity()
        export = (request.args.get("export") or "").lower()
        if export not in {"", "csv", "xlsx"}:
            raise ValidationError("export must be csv or xlsx")

        report = container.time_clock_service.get_org_weekly_hours_comparison(
            org_id, request.args.get("weekId") or None
        )

        if export == "csv":
            return app.response_class(
                hours_comparison_csv(report).encode("utf-8"),
                mimetype="text/csv",
                headers={"Content-Disposition": f'attachment; filename="{export_filename(report, "csv")}"'},
            )
        if export == "xlsx":
            return send_file(
                io.BytesIO(hours_comparison_xlsx(report)),
                mimetype=XLSX_MIMETYPE,
                as_attachment=True,
                download_name=export_filename(report, "xlsx"),
            )
        return jsonify({"success": True, "data": report.as_dict()}), 200

    @app.route("/api/v1/analytics/weekly-summary", methods=["GET"], endpoint="analytics_weekly_summary")
    @manager_required
    @handle_domain_errors
    def analytics_weekly_summary():
        _, org_id = current_identity()
        summary = container.hours_report_service.build_weekly_summary(org_id, request.args.get("weekId") or None)
        return jsonify({"success": True, "data": summary.as_dict()}), 200
