""" Local configuration for EasyCrypto clients and services. Settings come
    from three places, in increasing order of priority: the built-in
    defaults, a ``config.json`` file in the configuration directory, and
    ``EASYCRYPTO_<NAME>`` environment variables.
"""

import os
import threading

from . import json


defaults = dict()
defaults['address'] = '127.0.0.1'
defaults['port'] = 10000
defaults['client_port'] = 10001
defaults['encoding'] = 'utf-16'

_cache = dict()
_cache_lock = threading.Lock()


def directory(default=None):
    """ Return the directory location where we should be loading
        configuration files from. This defaults to ``$HOME/.easycrypto``,
        but can be overridden by calling this method with a valid path, or
        by setting the ``EASYCRYPTO_HOME`` environment variable. Note that
        changes to the environment variable will be ignored unless it is set
        prior to the first invocation of this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        os.environ['EASYCRYPTO_HOME'] = default
        directory.found = default
        reset()


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['EASYCRYPTO_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('EASYCRYPTO_HOME and HOME environment variables not set, cannot determine configuration directory')

    found = os.path.join(home, '.easycrypto')

    directory.found = found
    return found

directory.found = None



def get(name):
    """ Return the current value of the setting *name*. A KeyError is raised
        for a setting that has no built-in default.
    """

    if name not in defaults:
        raise KeyError('unknown setting: ' + str(name))

    with _cache_lock:
        if len(_cache) == 0:
            _cache.update(load())

        return _cache[name]



def load():
    """ Assemble and return the full settings dictionary, bypassing the
        cache used by :func:`get`.
    """

    settings = dict(defaults)
    settings.update(_load_file())

    for name, default in defaults.items():
        variable = 'EASYCRYPTO_' + name.upper()

        try:
            value = os.environ[variable]
        except KeyError:
            continue

        settings[name] = value

    for name, default in defaults.items():
        if isinstance(default, int):
            try:
                settings[name] = int(settings[name])
            except (TypeError, ValueError):
                raise ValueError('setting %s must be an integer: %r' % (name, settings[name])) from None

    return settings



def reset():
    """ Forget any cached settings; the next :func:`get` reloads them.
    """

    with _cache_lock:
        _cache.clear()



def _load_file():

    filename = os.path.join(directory(), 'config.json')

    try:
        contents = open(filename, 'rb').read()
    except FileNotFoundError:
        return dict()

    try:
        loaded = json.loads(contents)
    except json.DecodeError as e:
        raise ValueError('cannot parse %s: %s' % (filename, e)) from None

    if not isinstance(loaded, dict):
        raise ValueError(filename + ' must contain a JSON object')

    settings = dict()
    for name in defaults:
        if name in loaded:
            settings[name] = loaded[name]

    return settings


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
