"""
Tests for structured logging setup.
"""
import json
import logging

import pytest
import structlog

from pipeline_estimation.logging_config import EstimationContext, configure_logging, get_logger


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / 'estimation.log'
    yield path
    for handler in logging.getLogger().handlers + logging.getLogger('pipeline_estimation').handlers:
        handler.close()
    structlog.reset_defaults()


def read_events(path):
    for handler in logging.getLogger('pipeline_estimation').handlers:
        handler.flush()
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


def test_file_lines_are_single_json_objects(log_file):
    """Test that each file line decodes straight to the event dict."""
    configure_logging(log_level="INFO", log_file=str(log_file))
    get_logger("pipeline_estimation.tests").info("Estimate written", job_id="recJ1", days=4)

    events = read_events(log_file)
    written = [e for e in events if e.get('event') == 'Estimate written']

    assert len(written) == 1
    assert written[0]['job_id'] == 'recJ1'
    assert written[0]['days'] == 4
    assert written[0]['level'] == 'info'


def test_estimation_context_logs_failure(log_file):
    """Test that a failed run is logged with its error type and re-raised."""
    configure_logging(log_level="INFO", log_file=str(log_file))

    with pytest.raises(RuntimeError):
        with EstimationContext('throughput', operation_id='op123'):
            raise RuntimeError("boom")

    failed = [e for e in read_events(log_file) if e.get('event') == 'Estimation run failed']
    assert failed[0]['operation_id'] == 'op123'
    assert failed[0]['error_type'] == 'RuntimeError'
