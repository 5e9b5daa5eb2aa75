# -*- coding: utf-8 -*-

import setuptools

reqs = ['pygit2>=1.15']

setuptools.setup(
    name='perfact-gitff',
    version='1.0.0',
    description='Fast-forward git branches without losing history',
    long_description=''' ''',
    author='Ján Jockusch et.al.',
    author_email='devel@perfact.de',
    packages=setuptools.find_namespace_packages(include=['perfact.*']),
    package_data={
    },
    entry_points={
        'console_scripts': [
            'gitff=perfact.gitff.scripts:gitff',
            'git-ff=perfact.gitff.scripts:git_ff',
            'git-recent=perfact.gitff.scripts:git_recent',
        ]
    },
    license='GPLv2',
    platforms=['Linux', ],
    install_requires=reqs,
    extras_require={
        'test': ['pytest'],
    },
)
