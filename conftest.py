import pytest
import perfact.gitff.tests.environment as env
from perfact.gitff.helpers import Namespace

'''
Create a fixture for tests to use, created from the classes in environment.py
'''


@pytest.fixture(scope='function')
def environment():
    myenv = {
        'repo': env.Repository(),
    }
    myenv['config'] = env.GitFFConfig(env=myenv)

    yield Namespace(**myenv)

    for item in myenv.values():
        item.cleanup()
