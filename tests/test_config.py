import pytest
import yaml

from finance_visualizer import config


def test_defaults_when_file_missing(tmp_path, monkeypatch):
    monkeypatch.delenv(config.DB_ENV, raising=False)
    cfg = config.load_config(tmp_path / 'missing.yaml')
    assert cfg == config.DEFAULT_CONFIG


def test_file_values_merge_over_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(config.DB_ENV, raising=False)
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump({'currency_symbol': '€', 'api': {'port': 9000}}))

    cfg = config.load_config(path)
    assert cfg['currency_symbol'] == '€'
    assert cfg['api'] == {'host': '127.0.0.1', 'port': 9000}
    assert cfg['db_path'] == 'finance.db'


def test_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump({'db_path': 'file.db'}))
    monkeypatch.setenv(config.CONFIG_ENV, str(path))
    monkeypatch.setenv(config.DB_ENV, str(tmp_path / 'env.db'))

    cfg = config.load_config()
    assert cfg['db_path'] == str(tmp_path / 'env.db')


def test_non_mapping_config_is_rejected(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        config.load_config(path)
