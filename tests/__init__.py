"""
Ticket Insights Test Suite

Run tests with:
    pytest tests/
    pytest tests/test_extractor.py -v
    pytest tests/test_metrics.py::TestEfficiencyScore -v
"""
