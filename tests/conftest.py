import pytest

from helpers import RecordingLogger


@pytest.fixture
def recording_logger():
    return RecordingLogger()
