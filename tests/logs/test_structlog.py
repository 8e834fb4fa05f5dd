import logging

import structlog

from constraint_core.config.solver import SolverConfig
from constraint_core.constraint import Operator
from constraint_core.logs.structlog import ModuleFilter, configure
from constraint_core.solver import Solver
from constraint_core.variable import Variable


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_module_filter_passes_everything_without_rules():
    assert ModuleFilter({}).filter(_record("anything", logging.DEBUG))


def test_module_filter_uses_first_matching_rule():
    module_filter = ModuleFilter({"constraint_core": "DEBUG", "*": "WARNING"})

    assert module_filter.filter(_record("constraint_core.solver", logging.DEBUG))
    assert not module_filter.filter(_record("other", logging.INFO))
    assert module_filter.filter(_record("other", logging.ERROR))


def test_module_filter_unknown_level_defaults_to_info():
    module_filter = ModuleFilter({"*": "NOT_A_LEVEL"})

    assert not module_filter.filter(_record("x", logging.DEBUG))
    assert module_filter.filter(_record("x", logging.INFO))


def test_configure_console_only(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    configure(service_name="constraint_core", log_level="info")

    handler_classes = {type(h) for h in logging.getLogger().handlers}
    assert logging.StreamHandler in handler_classes
    assert not list(tmp_path.iterdir())
    structlog.reset_defaults()


def test_configure_with_log_dir(tmp_path):
    log_dir = tmp_path / "logs"
    configure(service_name="constraint_core", log_level="DEBUG", log_dir=str(log_dir))

    structlog.get_logger("constraint_core").info("hello")

    assert (log_dir / "constraint_core.log").is_file()
    structlog.reset_defaults()


def test_file_log_carries_callsite_and_bound_context(tmp_path):
    log_dir = tmp_path / "logs"
    configure(service_name="constraint_core", log_level="DEBUG", log_dir=str(log_dir))
    try:
        Solver(SolverConfig(log_level="DEBUG")).create_constraint(Variable("x"), Operator.EQ, 1)
        content = (log_dir / "constraint_core.log").read_text(encoding="utf-8")
    finally:
        logging.getLogger("constraint_core.solver").setLevel(logging.NOTSET)
        structlog.reset_defaults()

    assert "constraint added" in content
    assert "component=Solver" in content
    assert "func_name=add_constraint" in content


def test_file_log_includes_stdlib_extra_fields(tmp_path):
    log_dir = tmp_path / "logs"
    configure(service_name="constraint_core", log_level="DEBUG", log_dir=str(log_dir))
    try:
        logging.getLogger("constraint_core.tests").info("plain record", extra={"rows": 3})
        content = (log_dir / "constraint_core.log").read_text(encoding="utf-8")
    finally:
        structlog.reset_defaults()

    assert "plain record" in content
    assert "rows=3" in content
