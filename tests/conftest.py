import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_pagewright_logger():
    """Undo ``configure_logging()`` so handlers never outlive a test's capture."""
    logger = logging.getLogger("pagewright")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
