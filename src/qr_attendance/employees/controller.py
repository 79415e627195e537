from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    @roles_required(Role.KIOSK, Role.ADMIN)
    def api_employees():
        """Active employees, for the kiosk's employee picker."""
        employees = container.employees_repo.list_active()
        return (
            jsonify(
                {
                    "success": True,
                    "employees": [
                        {"employee_id": e.employee_code, "name": e.name, "department": e.department}
                        for e in employees
                    ],
                }
            ),
            200,
        )
