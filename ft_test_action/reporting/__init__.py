"""Reading and correlation of engine results."""

from ft_test_action.reporting.correlator import ResultCorrelator
from ft_test_action.reporting.junit import load_junit_results, parse_junit_xml
from ft_test_action.reporting.run_results import load_run_steps

__all__ = [
    "ResultCorrelator",
    "load_junit_results",
    "load_run_steps",
    "parse_junit_xml",
]
