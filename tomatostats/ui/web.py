"""JSON API for TomatoStats.

A lightweight Flask app exposing the statistics read API and the
record write API to a renderer:
- Today's total
- Week heatmap (21 cells), month grid (42 cells), year totals
- Appending completed intervals
"""

import logging
from datetime import date, datetime
from typing import Any, Optional

from flask import Flask, jsonify, request

from tomatostats.core.calendar_anchor import Granularity
from tomatostats.core.errors import InvalidInputError
from tomatostats.core.models import Record
from tomatostats.reporting.formatter import TextFormatter

logger = logging.getLogger(__name__)

# Will be set by serve()
_manager_ref = None  # type: Optional[Any]  # StatsManager


def create_flask_app() -> Flask:
    app = Flask(__name__)

    @app.errorhandler(InvalidInputError)
    def handle_invalid_input(exc):
        return jsonify({"error": str(exc)}), 400

    @app.route("/api/stats/today")
    def api_today():
        if _manager_ref is None:
            return jsonify({"error": "not initialized"}), 503
        now = _manager_ref.navigator.now()
        today = _manager_ref.aggregator.get_today_stats(now)
        return jsonify({
            "date": _manager_ref.anchor.local_date(now).isoformat(),
            "seconds": _manager_ref.aggregator.day_total(now),
            "duration": today.duration,
            "label": today.label,
        })

    @app.route("/api/stats/week")
    def api_week():
        if _manager_ref is None:
            return jsonify({"error": "not initialized"}), 503
        start = _bucket_start_arg(Granularity.WEEK)
        stats = _manager_ref.get_week_stats(start)
        nav = _manager_ref.navigator
        return jsonify({
            **_navigation(Granularity.WEEK, start),
            "title": TextFormatter.week_range(stats),
            "week_end": stats.week_end.date().isoformat(),
            "weekday_labels": list(_manager_ref.anchor.weekday_labels()),
            "today_index": nav.today_index_in_week(start),
            "total_duration": stats.total_duration,
            "total_formatted": TextFormatter.format_duration(stats.total_duration),
            "daily_totals": list(stats.daily_totals),
            "cells": [
                {
                    "date": cell.date.date().isoformat(),
                    "period": cell.period.value,
                    "duration": cell.duration,
                    "formatted": TextFormatter.format_duration(cell.duration),
                    "is_empty": cell.is_empty,
                    "intensity": cell.intensity,
                }
                for cell in stats.cells
            ],
        })

    @app.route("/api/stats/month")
    def api_month():
        if _manager_ref is None:
            return jsonify({"error": "not initialized"}), 503
        start = _bucket_start_arg(Granularity.MONTH)
        stats = _manager_ref.get_month_stats(start)
        return jsonify({
            **_navigation(Granularity.MONTH, start),
            "title": TextFormatter.month_title(stats),
            "weekday_labels": list(_manager_ref.anchor.weekday_labels()),
            "leading_empty": stats.leading_empty,
            "today_index": _manager_ref.navigator.today_index_in_month(start),
            "total_duration": stats.total_duration,
            "total_formatted": TextFormatter.format_duration(stats.total_duration),
            "daily_totals": list(stats.daily_totals),
            "cells": [
                {
                    "date": cell.date.date().isoformat(),
                    "day": cell.day_number,
                    "duration": cell.duration,
                    "is_in_current_month": cell.is_in_current_month,
                    "is_empty": cell.is_empty,
                    "intensity": cell.intensity,
                }
                for cell in stats.cells
            ],
        })

    @app.route("/api/stats/year")
    def api_year():
        if _manager_ref is None:
            return jsonify({"error": "not initialized"}), 503
        start = _bucket_start_arg(Granularity.YEAR)
        stats = _manager_ref.get_year_stats(start)
        return jsonify({
            **_navigation(Granularity.YEAR, start),
            "title": TextFormatter.year_title(stats),
            "total_duration": stats.total_duration,
            "total_formatted": TextFormatter.format_duration(stats.total_duration),
            "monthly_totals": list(stats.monthly_totals),
        })

    @app.route("/api/records", methods=["POST"])
    def api_add_record():
        if _manager_ref is None:
            return jsonify({"error": "not initialized"}), 503
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return jsonify({"error": "JSON object required"}), 400
        if "duration" not in data:
            return jsonify({"error": "duration required"}), 400
        timestamp = None
        if data.get("timestamp"):
            try:
                timestamp = datetime.fromisoformat(data["timestamp"])
            except (TypeError, ValueError):
                return jsonify({"error": f"invalid timestamp: {data['timestamp']!r}"}), 400
        record = _manager_ref.add_record(
            data["duration"], data.get("kind", "work"), timestamp
        )
        body = _record_response(record)
        if _manager_ref.store.last_persist_error is not None:
            body["persist_error"] = str(_manager_ref.store.last_persist_error)
        return jsonify(body), 201

    return app


def serve(manager, host: str = "127.0.0.1", port: int = 5556) -> None:
    """Run the API in the foreground until interrupted."""
    global _manager_ref
    _manager_ref = manager
    flask_app = create_flask_app()
    logger.info("Stats API listening on http://%s:%d", host, port)
    flask_app.run(host=host, port=port, debug=False, use_reloader=False)


def _bucket_start_arg(granularity: Granularity) -> datetime:
    """Read ``?start=YYYY-MM-DD`` or fall back to the current bucket."""
    raw = request.args.get("start")
    if not raw:
        return _manager_ref.navigator.current_start(granularity)
    try:
        day = date.fromisoformat(raw)
    except ValueError as exc:
        raise InvalidInputError(f"start must be YYYY-MM-DD, got {raw!r}") from exc
    return datetime(day.year, day.month, day.day, tzinfo=_manager_ref.anchor.tz)


def _navigation(granularity: Granularity, start: datetime) -> dict[str, Any]:
    nav = _manager_ref.navigator
    is_current = nav.is_current(granularity, start)
    following = None if is_current else nav.offset(granularity, start, 1).date().isoformat()
    return {
        "start": start.date().isoformat(),
        "is_current": is_current,
        "previous": nav.offset(granularity, start, -1).date().isoformat(),
        "next": following,
    }


def _record_response(record: Record) -> dict[str, Any]:
    return {
        "id": record.id,
        "timestamp": record.timestamp.isoformat(),
        "duration": record.duration,
        "kind": record.kind.value,
        "period": record.period.value,
    }
