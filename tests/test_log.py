import io

from qnsdk import log
from qnsdk.log import DEBUG_PREFIX, INFO_PREFIX, WARN_PREFIX, Logger, LogLevel


def test_logger_prefix():
    buf = io.StringIO()
    logger = Logger(buf, INFO_PREFIX, LogLevel.INFO)
    logger.info("hello world")
    splits = buf.getvalue().split(" ")
    assert splits[0] == INFO_PREFIX.strip(" ")


def test_line_layout():
    buf = io.StringIO()
    logger = Logger(buf, INFO_PREFIX, LogLevel.INFO)
    logger.info("hello", "world", 3)
    parts = buf.getvalue().split(" ")
    assert parts[0] == "[I]"
    assert parts[3:] == ["hello", "world", "3\n"]
    date, clock = parts[1], parts[2]
    assert len(date) == 10
    assert [date[4], date[7]] == ["/", "/"]
    assert len(clock) == 8
    assert [clock[2], clock[5]] == [":", ":"]


def test_lower_levels_are_dropped():
    buf = io.StringIO()
    logger = Logger(buf, WARN_PREFIX, LogLevel.WARN)
    logger.debug("a")
    logger.info("b")
    assert buf.getvalue() == ""
    logger.warn("c")
    assert buf.getvalue().endswith(" c\n")


def test_debug_level_passes_everything():
    buf = io.StringIO()
    logger = Logger(buf, DEBUG_PREFIX, LogLevel.DEBUG)
    logger.debug("x")
    logger.info("y")
    logger.warn("z")
    assert len(buf.getvalue().splitlines()) == 3


def test_module_functions_write_to_stdout(capsys):
    log.debug("dbg")
    log.info("inf")
    log.warn("wrn")
    lines = capsys.readouterr().out.splitlines()
    assert [line[:4] for line in lines] == [DEBUG_PREFIX, INFO_PREFIX, WARN_PREFIX]
    assert [line.rsplit(" ", 1)[1] for line in lines] == ["dbg", "inf", "wrn"]