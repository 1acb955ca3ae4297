import pytest


def pytest_addoption(parser):
    parser.addoption("--skip-long-test", action="store_true",
                     help="do not run long tests")


def pytest_configure(config):
    config.addinivalue_line("markers", "long_test: test taking more than a few seconds")


def pytest_runtest_setup(item):
    if 'long_test' in item.keywords and item.config.getoption("--skip-long-test"):
        pytest.skip("ignored per user request")
