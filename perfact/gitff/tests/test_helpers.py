# -*- coding: utf-8 -*-
import os
import tempfile

import pytest

from perfact.gitff import helpers
from perfact.gitff.errors import ConfigurationError


def test_namespace():
    ns = helpers.Namespace({'a': 1}, b=2)
    assert ns.a == 1
    assert ns.b == 2


def test_read_config_defaults():
    """
    A missing config file that is not required yields the defaults
    """
    config = helpers.read_config('/nonexistent/gitff.py', required=False)
    assert config == helpers.DEFAULT_CONFIG
    # The defaults themselves are not handed out
    config['base_dir'] = '/somewhere'
    assert helpers.DEFAULT_CONFIG['base_dir'] == '.'


def test_read_config_required():
    with pytest.raises(ConfigurationError):
        helpers.read_config('/nonexistent/gitff.py')


def test_read_config_overrides():
    """
    Values from the file replace the defaults, private names are skipped
    """
    with tempfile.TemporaryDirectory() as folder:
        path = os.path.join(folder, 'gitff.py')
        with open(path, 'w') as f:
            f.write("base_dir = '/srv/repo'\n_private = 1\n")
        config = helpers.read_config(path)
    assert config['base_dir'] == '/srv/repo'
    assert config['show_progress'] is True
    assert '_private' not in config


def test_load_config():
    """
    Only the public names of the executed file are returned
    """
    with tempfile.TemporaryDirectory() as folder:
        path = os.path.join(folder, 'gitff.py')
        with open(path, 'w') as f:
            f.write("import os\n_step = 5\nprogress_step = _step * 2\n")
        config = helpers.load_config(path)
    assert config['progress_step'] == 10
    assert config['os'].__name__ == 'os'
    assert set(config) == {'os', 'progress_step'}


def test_columns():
    rows = [
        ('* ', 'main', 'already on v1'),
        ('  ', 'feature-long', 'fast-forward to v1'),
    ]
    assert helpers.columns(rows) == [
        '* main          already on v1',
        '  feature-long  fast-forward to v1',
    ]
    assert helpers.columns([]) == []
