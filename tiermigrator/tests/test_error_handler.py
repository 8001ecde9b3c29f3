import pytest

from tiermigrator.exceptions import ConfigurationException, OperationException
from tiermigrator.utils.error_handler import convert_exceptions, log_exceptions, to_operation_error


@convert_exceptions({KeyError: OperationException})
def _lookup(key):
    return {"a": 1}[key]


@convert_exceptions({Exception: OperationException})
async def _fail_async(exc):
    raise exc


@convert_exceptions({Exception: OperationException})
async def _records(fail_after):
    for i in range(fail_after):
        yield i
    raise ConnectionError("page fetch failed")


def test_sync_conversion():
    assert _lookup("a") == 1
    with pytest.raises(OperationException) as exc_info:
        _lookup("missing")
    assert exc_info.value.details == {"original_exception": "KeyError"}
    assert isinstance(exc_info.value.__cause__, KeyError)


def test_unmapped_exception_passes_through():
    with pytest.raises(TypeError):
        _lookup(["unhashable"])


@pytest.mark.asyncio
async def test_async_conversion():
    with pytest.raises(OperationException, match="boom"):
        await _fail_async(RuntimeError("boom"))


@pytest.mark.asyncio
async def test_project_exceptions_not_rewrapped():
    with pytest.raises(ConfigurationException):
        await _fail_async(ConfigurationException("bad config"))


@pytest.mark.asyncio
async def test_async_generator_conversion():
    seen = []
    with pytest.raises(OperationException, match="page fetch failed"):
        async for item in _records(3):
            seen.append(item)
    assert seen == [0, 1, 2]


def test_to_operation_error():
    converted = to_operation_error(ValueError("bad"), "Batch tier request failed")
    assert isinstance(converted, OperationException)
    assert str(converted) == "Batch tier request failed: bad"
    assert converted.error_code == "OPERATION_ERROR"

    original = ConfigurationException("keep me")
    assert to_operation_error(original) is original


def test_log_exceptions_logs_and_reraises(log_lines):
    @log_exceptions(include_traceback=False, custom_message="Listing failed")
    def explode():
        raise RuntimeError("no route")

    with pytest.raises(RuntimeError):
        explode()
    assert "Listing failed: no route" in log_lines
