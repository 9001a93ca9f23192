import logging
import os
import sys

import pytest

# Ensure repository root is on sys.path so 'usim' imports work when running tests
_HERE = os.path.dirname(__file__)
_ROOT = os.path.abspath(os.path.join(_HERE, '..'))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)


@pytest.fixture(autouse=True)
def reset_usim_logger():
    """Drop handlers installed by setup_logging so they do not outlive the captured streams."""
    yield
    logger = logging.getLogger('usim')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
