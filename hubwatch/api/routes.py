"""Flask blueprint exposing the read-only server API."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from flask import Blueprint, jsonify

from ..entries import META_TITLE
from ..services.aggregator import MetaEntryHolder
from ..services.stats import StatsService
from ..storage import Storage, StoreError
from ..utils import make_id, utc_now
from . import schemas

LOGGER = logging.getLogger("hubwatch.api")


def create_blueprint(
    store: Storage,
    stats: StatsService,
    hub: MetaEntryHolder,
    clock: Callable[[], datetime] = utc_now,
) -> Blueprint:
    bp = Blueprint("hubwatch_api", __name__)
    meta_id = make_id(META_TITLE)

    def not_found(server_id: str):
        return jsonify(schemas.failure(f"unknown server {server_id}").to_dict()), 404

    def points_response(server_id: str, loader):
        if store.get_entry(server_id) is None:
            return not_found(server_id)
        points = loader(server_id, clock())
        return jsonify(
            schemas.success(
                {"server_id": server_id, "points": [p.to_dict() for p in points]}
            ).to_dict()
        )

    def averages_response(server_id: str, loader):
        if store.get_entry(server_id) is None:
            return not_found(server_id)
        return jsonify(
            schemas.success(
                {"server_id": server_id, "averages": loader(server_id, clock())}
            ).to_dict()
        )

    @bp.errorhandler(StoreError)
    def store_error(exc: StoreError):
        LOGGER.error("Store error while serving request: %s", exc)
        return jsonify(schemas.failure("storage unavailable").to_dict()), 503

    @bp.route("/health", methods=["GET"])
    def health():
        return jsonify(schemas.success({"status": "ok"}).to_dict())

    @bp.route("/servers", methods=["GET"])
    def list_servers():
        entries = [entry for entry in store.load_entries() if entry.id != meta_id]
        entries.sort(key=lambda entry: (-entry.players, entry.title))
        current = hub.current()
        return jsonify(
            schemas.success(
                {
                    "servers": [entry.to_dict() for entry in entries],
                    "hub": current.to_dict() if current else None,
                }
            ).to_dict()
        )

    @bp.route("/servers/<server_id>", methods=["GET"])
    def get_server(server_id: str):
        entry = store.get_entry(server_id)
        if entry is None:
            return not_found(server_id)
        return jsonify(schemas.success({"server": entry.to_dict()}).to_dict())

    @bp.route("/servers/<server_id>/daily", methods=["GET"])
    def daily(server_id: str):
        return points_response(server_id, stats.daily)

    @bp.route("/servers/<server_id>/weekly", methods=["GET"])
    def weekly(server_id: str):
        return points_response(server_id, stats.weekly)

    @bp.route("/servers/<server_id>/averagedaily", methods=["GET"])
    def average_daily(server_id: str):
        return averages_response(server_id, stats.average_daily)

    @bp.route("/servers/<server_id>/averagehourly", methods=["GET"])
    def average_hourly(server_id: str):
        return averages_response(server_id, stats.average_hourly)

    @bp.route("/hub", methods=["GET"])
    def current_hub():
        current = hub.current()
        if current is None:
            return jsonify(schemas.failure("no completed scrape yet").to_dict()), 404
        return jsonify(schemas.success({"hub": current.to_dict()}).to_dict())

    return bp
