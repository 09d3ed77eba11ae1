import json
import logging

from carbon_strategy.core.log import JsonLineFormatter, setup_logging


def _record(msg, *args):
    return logging.LogRecord("carbon_strategy.pricing.remote", logging.WARNING, __file__, 1, msg, args, None)


def test_json_lines_escape_quotes():
    line = JsonLineFormatter().format(_record('curve service said %s', '{"error": "bad \\"spread\\""}'))
    payload = json.loads(line)
    assert payload["level"] == "WARNING"
    assert payload["name"] == "carbon_strategy.pricing.remote"
    assert payload["msg"] == 'curve service said {"error": "bad \\"spread\\""}'


def test_setup_logging_replaces_root_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("debug", "json")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonLineFormatter)
        setup_logging("warning")
        assert not isinstance(root.handlers[0].formatter, JsonLineFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
