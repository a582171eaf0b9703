import logging

import pytest

from dmarc_report_cli.logging import configure_logging


@pytest.fixture(name="reset_logging")
def fixture_reset_logging():
    yield None
    logging.Logger.manager.loggerDict.clear()
    configure_logging({}, debug=True)
