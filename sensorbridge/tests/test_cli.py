from sensorbridge import __main__ as cli
from sensorbridge import config


def test_positional_overrides(monkeypatch):
    for name in ("PORT_NAME", "BAUD_RATE", "HOST_NAME", "HTTP_PORT", "DB_PATH"):
        monkeypatch.setattr(config, name, getattr(config, name))
    args = cli.build_parser().parse_args(["/dev/pts/7", "115000", "0.0.0.0", "7100", "/tmp/test.db"])
    cli.apply_args(args)
    assert config.PORT_NAME == "/dev/pts/7"
    assert config.BAUD_RATE == 115000
    assert config.HOST_NAME == "0.0.0.0"
    assert config.HTTP_PORT == 7100
    assert config.DB_PATH == "/tmp/test.db"


def test_defaults_come_from_config():
    args = cli.build_parser().parse_args([])
    assert args.port == config.PORT_NAME
    assert args.http_port == config.HTTP_PORT
