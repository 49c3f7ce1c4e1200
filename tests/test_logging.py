import json
import logging

from torrentbuilder.common.logging import JSONLogFormatter, config_logging, stop_logging


def make_record(**extra):
    record = logging.LogRecord(
        "torrentbuilder.torrent.hasher",
        logging.INFO,
        __file__,
        10,
        "Hashed %d bytes",
        (50,),
        None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_maps_keys_and_extras():
    formatter = JSONLogFormatter(fmt_keys={"level": "levelname", "logger": "name"})

    payload = json.loads(formatter.format(make_record(piece_count=2)))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "torrentbuilder.torrent.hasher"
    assert payload["message"] == "Hashed 50 bytes"
    assert payload["piece_count"] == 2
    assert "timestamp" in payload
    assert not {"args", "msg", "levelno", "taskName"} & payload.keys()


def test_config_logging_writes_json_lines(tmp_path):
    log_path = config_logging("run.jsonl", verbose=True, log_dir=tmp_path / "logs")
    try:
        logging.getLogger("torrentbuilder.test").debug("walking", extra={"file_count": 3})
    finally:
        stop_logging()

    assert log_path == tmp_path / "logs" / "run.jsonl"
    entry = json.loads(log_path.read_text().splitlines()[-1])
    assert entry["message"] == "walking"
    assert entry["level"] == "DEBUG"
    assert entry["file_count"] == 3
