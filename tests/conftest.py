import pytest

from vehicle_carbon.audit import audit_logger


@pytest.fixture(autouse=True)
def no_audit_file():
    # Keep test runs from writing audit logs into reports/
    audit_logger.enabled = False
    yield
    audit_logger.enabled = True


@pytest.fixture(autouse=True)
def reports_in_tmp(tmp_path, monkeypatch):
    # Visualizers built without an output_root write here instead of reports/
    monkeypatch.setattr("vehicle_carbon.visualization.report_directory", str(tmp_path))
    return tmp_path
