from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/voting/results", methods=["GET"], endpoint="voting_results")
    def voting_results():
        return jsonify(container.results_service.public_results())

    @app.route("/api/admin/votes/results", methods=["GET"], endpoint="admin_vote_results")
    @admin_required
    def admin_vote_results():
        return jsonify(container.results_service.admin_results())

    @app.route("/api/admin/dashboard/stats", methods=["GET"], endpoint="admin_dashboard_stats")
    @admin_required
    def admin_dashboard_stats():
        return jsonify(container.dashboard_service.dashboard_stats())
