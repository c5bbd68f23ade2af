import yaml

from dashboard_lib import setup as setup_mod
from dashboard_lib.config import YamlConfigStore


def test_parse_args_defaults():
    args = setup_mod.parse_args([])
    assert args.port == 3000
    assert args.host == '0.0.0.0'
    assert args.print_template is False


def test_print_template(capsys):
    rc = setup_mod.setup(['--print-template'])
    out = capsys.readouterr().out
    assert rc == 0
    data = yaml.safe_load(out)
    assert data['store']['reserved_prefixes'] == ['mserv_', 'dashboard_']


def test_write_template_once(tmp_path, capsys):
    target = tmp_path / 'dashboard.yml'
    assert setup_mod.setup(['--write-template', '--config', str(target)]) == 0
    assert YamlConfigStore(target).load().store.eviction_batch_size == 5
    assert setup_mod.setup(['--write-template', '--config', str(target)]) == 1
    assert 'already exists' in capsys.readouterr().out


def test_no_action_returns_negative():
    assert setup_mod.setup(['--port', '8080']) == -1
