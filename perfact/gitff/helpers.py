# -*- coding: utf-8 -*-
import os
import importlib.machinery
import importlib.util

from .errors import ConfigurationError

# Used for every key that the configuration file does not set
DEFAULT_CONFIG = {
    'base_dir': '.',
    'show_progress': True,
    'progress_step': 10,
    'reflog_message': 'gitff: fast-forward to {target}',
    'date_format': '%Y-%m-%d %H:%M:%S',
}


class Namespace(object):
    """
    Convert a dict to a namespace, allowing access via a.b instead of a['b']
    """
    def __init__(self, data=None, **kw):
        if data:
            self.__dict__.update(data)
        self.__dict__.update(kw)


def load_config(filename):
    '''Execute the Python file at "filename" and return its public names
    (those not starting with '_') with their values as a dictionary.
    '''
    loader = importlib.machinery.SourceFileLoader('config', filename)
    spec = importlib.util.spec_from_loader(loader.name, loader)
    mod = importlib.util.module_from_spec(spec)
    loader.exec_module(mod)

    return {
        name: getattr(mod, name)
        for name in dir(mod)
        if not name.startswith('_')
    }


def read_config(filename, required=True):
    '''
    Return the defaults updated by the contents of the config file. If the
    file does not exist and is not required, the defaults are returned.
    '''
    config = dict(DEFAULT_CONFIG)
    if not os.path.exists(filename):
        if required:
            raise ConfigurationError(
                'Config file {} not found'.format(filename)
            )
        return config
    config.update(load_config(filename))
    return config


def columns(rows, pad=2):
    '''
    Format rows of (prefix, name, text) so that the texts start in the same
    column. Returns the list of lines.
    '''
    width = max((len(name) for _, name, _ in rows), default=0) + pad
    return [
        '{}{}{}'.format(prefix, name.ljust(width), text)
        for prefix, name, text in rows
    ]
